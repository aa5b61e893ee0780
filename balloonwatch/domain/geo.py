"""Great-circle helpers on a spherical Earth."""

from __future__ import annotations

import math
from typing import Optional

EARTH_RADIUS_M = 6371000.0


def haversine_m(a_lat: float, a_lon: float, b_lat: float, b_lon: float) -> float:
    """Great-circle distance in meters between two lat/lon pairs."""

    phi1 = math.radians(a_lat)
    phi2 = math.radians(b_lat)
    dphi = math.radians(b_lat - a_lat)
    dlmb = math.radians(b_lon - a_lon)

    s = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    # rounding can push s a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(s, 1.0)))


def haversine_km(a_lat: float, a_lon: float, b_lat: float, b_lon: float) -> float:
    return haversine_m(a_lat, a_lon, b_lat, b_lon) / 1000.0


def bearing_deg(a_lat: float, a_lon: float, b_lat: float, b_lon: float) -> float:
    """Initial bearing (forward azimuth) from a to b, degrees true in [0, 360)."""

    phi1 = math.radians(a_lat)
    phi2 = math.radians(b_lat)
    dlmb = math.radians(b_lon - a_lon)

    y = math.sin(dlmb) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlmb)
    brng = (math.degrees(math.atan2(y, x)) + 360.0) % 360.0
    # (-tiny + 360) % 360 can round to exactly 360.0
    return 0.0 if brng >= 360.0 else brng


def angle_delta(a: Optional[float], b: Optional[float]) -> Optional[float]:
    """Absolute circular difference between two angles, in [0, 180]."""

    if a is None or b is None:
        return None
    d = abs(a - b) % 360.0
    return 360.0 - d if d > 180.0 else d


__all__ = ["EARTH_RADIUS_M", "angle_delta", "bearing_deg", "haversine_km", "haversine_m"]
