"""
Great-circle distance and position helpers.

Distances use the spherical law of cosines scaled to nautical miles with the
geodatasource constants. The separation limits are calibrated against this
exact pipeline; do not swap in haversine here.
"""
import math
from typing import Optional

# statute miles per degree * NM per statute mile
NM_PER_DEGREE = 60.0 * 1.1515 * 0.8684


def deg2rad(degrees: float) -> float:
    return (degrees * math.pi) / 180.0


def rad2deg(radians: float) -> float:
    return radians * 180.0 / math.pi


def great_circle_distance_nm(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance in nautical miles between two points given in radians."""
    theta = lon1 - lon2
    dist = math.sin(lat1) * math.sin(lat2) + math.cos(lat1) * math.cos(lat2) * math.cos(theta)
    # acos(1.0000000000000002) raises, identical points must give 0
    dist = min(1.0, max(-1.0, dist))
    dist = math.acos(dist)
    return rad2deg(dist) * NM_PER_DEGREE


def is_valid_position(lat: Optional[float], lon: Optional[float]) -> bool:
    """Check coordinates are finite and inside geographic bounds."""
    if lat is None or lon is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180
