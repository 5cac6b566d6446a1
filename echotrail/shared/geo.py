"""Geographic helpers."""

import math

from echotrail.shared.constants import EARTH_RADIUS_M


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates in meters."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def bucket_key(latitude: float, longitude: float, precision: int) -> str:
    """Build a cache key by rounding coordinates to a fixed precision.

    Args:
        latitude: Latitude in degrees
        longitude: Longitude in degrees
        precision: Decimal places kept (2 ~ 1 km, 3 ~ 100 m)

    Returns:
        Key such as "5991_1075" for precision 2
    """
    scale = 10 ** precision
    return f"{round(latitude * scale)}_{round(longitude * scale)}"
