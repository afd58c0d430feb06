"""Great-circle distance and nearby matching."""

import math

EARTH_RADIUS_KM = 6371.0
NEARBY_THRESHOLD_KM = 10.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def is_nearby(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    threshold_km: float = NEARBY_THRESHOLD_KM,
) -> bool:
    """Two points count as the same place when strictly closer than the threshold."""
    return haversine_km(lat1, lon1, lat2, lon2) < threshold_km
