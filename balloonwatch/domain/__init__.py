"""Pure domain logic: geodesy and risk scoring."""

from .geo import angle_delta, bearing_deg, haversine_km, haversine_m
from .risk import compute_risk

__all__ = ["angle_delta", "bearing_deg", "compute_risk", "haversine_km", "haversine_m"]
