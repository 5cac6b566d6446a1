"""Adaptation cache and metrics.

The cache evicts in insertion order (FIFO). A hit does not refresh an
entry's position.
"""

from collections import OrderedDict
from dataclasses import dataclass
import logging

from echotrail.modules.adaptation.interface import AdaptationMetrics, AdaptedContent
from echotrail.shared.models import ActivityContext

logger = logging.getLogger(__name__)


def make_cache_key(content_id: str, context_hash: str) -> str:
    return f"{content_id}_{context_hash}"


@dataclass(frozen=True)
class CacheEntry:
    """A cached adaptation and the identifiers it was stored under."""

    content_id: str
    context_hash: str
    adapted: AdaptedContent

    @property
    def key(self) -> str:
        return make_cache_key(self.content_id, self.context_hash)


class AdaptationCache:
    """Bounded FIFO cache of adapted content."""

    def __init__(self, capacity: int = 100) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def get(self, content_id: str, context_hash: str) -> AdaptedContent | None:
        entry = self._entries.get(make_cache_key(content_id, context_hash))
        return entry.adapted if entry else None

    def put(self, content_id: str, context_hash: str, adapted: AdaptedContent) -> CacheEntry | None:
        """Store an adaptation.

        Returns:
            The evicted entry when the cache was full, else None
        """
        key = make_cache_key(content_id, context_hash)
        evicted = None

        if key not in self._entries and len(self._entries) >= self.capacity:
            _, evicted = self._entries.popitem(last=False)
            logger.debug(f"Evicted adaptation {evicted.key}")

        self._entries[key] = CacheEntry(content_id, context_hash, adapted)
        return evicted

    def discard_content(self, content_id: str) -> int:
        """Drop every entry for a story. Returns the number removed."""
        keys = [key for key, entry in self._entries.items() if entry.content_id == content_id]
        for key in keys:
            del self._entries[key]
        return len(keys)

    def keys(self) -> list[str]:
        """Cache keys, oldest first."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries


class MetricsTracker:
    """Running averages over adaptation calls."""

    def __init__(self, success_threshold: float = 0.7) -> None:
        self.success_threshold = success_threshold
        self._metrics = AdaptationMetrics()

    def record(
        self,
        latency_ms: float,
        cache_hit: bool,
        confidence: float,
        activity: ActivityContext,
    ) -> None:
        m = self._metrics
        m.total_adaptations += 1
        total = m.total_adaptations

        if confidence >= self.success_threshold:
            m.successful_adaptations += 1

        m.average_confidence = (m.average_confidence * (total - 1) + confidence) / total
        m.adaptation_latency = (m.adaptation_latency * (total - 1) + latency_ms) / total
        m.cache_hit_rate = (m.cache_hit_rate * (total - 1) + (1 if cache_hit else 0)) / total
        m.context_counts[activity] = m.context_counts.get(activity, 0) + 1

    def snapshot(self) -> AdaptationMetrics:
        """Get a copy of the current metrics."""
        m = self._metrics
        return AdaptationMetrics(
            total_adaptations=m.total_adaptations,
            successful_adaptations=m.successful_adaptations,
            average_confidence=m.average_confidence,
            adaptation_latency=m.adaptation_latency,
            cache_hit_rate=m.cache_hit_rate,
            context_counts=dict(m.context_counts),
        )

    def reset(self) -> None:
        self._metrics = AdaptationMetrics()
