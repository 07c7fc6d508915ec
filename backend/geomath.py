# geomath.py
# great-circle midpoint, haversine distance and flat-speed travel time

from __future__ import annotations

import math

from models import Coordinate

EARTH_RADIUS_KM = 6371.0
DEFAULT_SPEED_KMH = 50.0


def _normalize_lng(lng: float) -> float:
    # canonical [-180, 180): +180 and -180 are the same meridian and both map to -180.
    # rounding first snaps float noise like 179.99999999999997 onto the boundary
    return (round(lng, 10) + 540.0) % 360.0 - 180.0


def midpoint(a: Coordinate, b: Coordinate) -> Coordinate:
    """
    Geographic midpoint along the great circle joining a and b
    (not the naive average of lat/lng).
    """
    if a == b:
        return a
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lng = math.radians(b.lng - a.lng)

    bx = math.cos(lat2) * math.cos(d_lng)
    by = math.cos(lat2) * math.sin(d_lng)

    lat3 = math.atan2(
        math.sin(lat1) + math.sin(lat2),
        math.sqrt((math.cos(lat1) + bx) ** 2 + by ** 2),
    )
    lng3 = math.radians(a.lng) + math.atan2(by, math.cos(lat1) + bx)

    return Coordinate(lat=math.degrees(lat3), lng=_normalize_lng(math.degrees(lng3)))


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """Haversine great-circle distance in km."""
    if a == b:
        return 0.0
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lam = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def travel_time_minutes(a: Coordinate, b: Coordinate, speed_kmh: float = DEFAULT_SPEED_KMH) -> int:
    """
    Straight-line minutes at a flat average speed, rounded up.
    A deliberate simplification: there is no routing behind this.
    """
    return math.ceil(distance_km(a, b) / speed_kmh * 60)
