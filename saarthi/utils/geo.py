"""
Geospatial helpers: great-circle distance and compass direction.
Pure functions, no failure modes.
"""

import math
from typing import Tuple

# Mean Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE",
    "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW",
    "W", "WNW", "NW", "NNW",
]

Coordinates = Tuple[float, float]  # (lat, lng) in decimal degrees


def distance_km(a: Coordinates, b: Coordinates) -> float:
    """
    Haversine distance between two (lat, lng) pairs.

    Args:
        a: First point (latitude, longitude)
        b: Second point (latitude, longitude)

    Returns:
        Distance in kilometers
    """
    lat1, lon1 = a
    lat2, lon2 = b
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)
    h = math.sin(delta_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c


def initial_bearing(start: Coordinates, end: Coordinates) -> float:
    """
    Initial bearing from `start` to `end`.

    Returns:
        Bearing in degrees (0-360, where 0=North, 90=East)
    """
    lat1, lon1 = start
    lat2, lon2 = end
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lon = math.radians(lon2 - lon1)

    y = math.sin(delta_lon) * math.cos(lat2_rad)
    x = (
        math.cos(lat1_rad) * math.sin(lat2_rad) -
        math.sin(lat1_rad) * math.cos(lat2_rad) * math.cos(delta_lon)
    )
    return (math.degrees(math.atan2(y, x)) + 360) % 360


def bearing_direction(start: Coordinates, end: Coordinates) -> str:
    """16-point compass label (N, NNE, ... NNW) for the bearing start -> end."""
    # half-up rounding so a bearing of exactly 11.25 lands on NNE
    index = int(math.floor((initial_bearing(start, end) % 360) / 22.5 + 0.5)) % 16
    return COMPASS_POINTS[index]
