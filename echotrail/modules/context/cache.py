"""Time- and size-bounded cache for resolved context data."""

from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Generic, TypeVar

from echotrail.shared.datetime_utils import is_expired

T = TypeVar("T")


@dataclass
class _TimedEntry(Generic[T]):
    value: T
    stored_at: datetime


class TimedCache(Generic[T]):
    """Key/value cache whose entries expire after a fixed time-to-live.

    Stale entries are never returned. Every write sweeps out expired
    entries, and once ``capacity`` is reached the oldest write is evicted
    (FIFO), so a moving listener cannot grow the cache without limit.
    """

    def __init__(self, ttl: timedelta, capacity: int = 256) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._ttl = ttl
        self.capacity = capacity
        self._entries: OrderedDict[str, _TimedEntry[T]] = OrderedDict()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def get(self, key: str, now: datetime) -> T | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if is_expired(entry.stored_at, self._ttl, now):
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: T, now: datetime) -> None:
        self._purge_expired(now)
        self._entries.pop(key, None)
        while len(self._entries) >= self.capacity:
            self._entries.popitem(last=False)
        self._entries[key] = _TimedEntry(value=value, stored_at=now)

    def _purge_expired(self, now: datetime) -> None:
        # Insertion order is write order, so expired entries sit at the front
        while self._entries:
            oldest = next(iter(self._entries.values()))
            if not is_expired(oldest.stored_at, self._ttl, now):
                break
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
