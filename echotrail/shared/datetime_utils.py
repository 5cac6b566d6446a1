"""Datetime utilities.

Time-of-day classification works on the device's local wall clock, while
cache freshness compares timestamps from the same clock. Services accept
an injectable ``Clock`` so tests can pin or advance time.
"""

from datetime import datetime, timedelta
from typing import Callable

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Get current local wall-clock time.

    Returns:
        Timezone-aware datetime in the system's local timezone
    """
    return datetime.now().astimezone()


def is_expired(
    recorded_at: datetime,
    ttl: timedelta,
    now: datetime,
) -> bool:
    """Check if a timestamped value has outlived its time-to-live.

    Args:
        recorded_at: When the value was produced
        ttl: How long the value stays fresh
        now: Current time from the same clock

    Returns:
        True if the value is stale and must not be reused
    """
    return now - recorded_at >= ttl
