"""
Great-circle helpers for station and route geometry.
"""

import math

# Earth radius in meters (WGS84 approximate)
EARTH_RADIUS_M = 6_371_000.0


def haversine_distance_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Return great-circle distance between two points in meters.
    Arguments in degrees.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def initial_bearing_deg(lat1: float, lng1: float, lat2: float, lng2: float) -> float | None:
    """Return the initial compass bearing from the first point to the second.

    Result is in degrees within [0, 360). Returns None when both points coincide.
    """
    if abs(lat1 - lat2) < 1e-12 and abs(lng1 - lng2) < 1e-12:
        return None

    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlng = math.radians(lng2 - lng1)

    y = math.sin(dlng) * math.cos(lat2_rad)
    x = math.cos(lat1_rad) * math.sin(lat2_rad) - math.sin(lat1_rad) * math.cos(
        lat2_rad
    ) * math.cos(dlng)
    angle = math.degrees(math.atan2(y, x))
    return angle + 360 if angle < 0 else angle
