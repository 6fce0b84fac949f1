"""
Great-circle distance between two points.

Coordinates are [longitude, latitude] in degrees throughout the service,
matching the GeoJSON order used by clients.
"""
import math
from typing import Sequence

EARTH_RADIUS_KM = 6371.0


def deg2rad(deg: float) -> float:
    return deg * (math.pi / 180)


def distance_km(coords1: Sequence[float], coords2: Sequence[float]) -> float:
    """Haversine distance in kilometers. Out-of-range inputs still yield a number."""
    lon1, lat1 = coords1
    lon2, lat2 = coords2
    d_lat = deg2rad(lat2 - lat1)
    d_lon = deg2rad(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(deg2rad(lat1)) * math.cos(deg2rad(lat2)) * math.sin(d_lon / 2) ** 2
    )
    # Rounding (or latitudes outside ±90) can push a just outside [0, 1]
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
