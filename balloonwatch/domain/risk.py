"""Bounded drift risk score from drift speed, wind mismatch and shear."""

from __future__ import annotations

import math
from typing import Optional

from balloonwatch.domain.geo import angle_delta
from balloonwatch.models.tracks import WindSample

DRIFT_CAP_KMH = 100.0
MISMATCH_CAP_DEG = 90.0
SHEAR_CAP = 30.0

DRIFT_WEIGHT = 0.4
MISMATCH_WEIGHT = 0.4
SHEAR_WEIGHT = 0.2


def _clamp01(value: float) -> float:
    return max(0.0, min(value, 1.0))


def preferred_wind_direction(wind: WindSample) -> Optional[float]:
    """700 hPa direction when available, else 500 hPa."""

    return wind.dir700 if wind.dir700 is not None else wind.dir500


def wind_shear(wind: WindSample) -> Optional[float]:
    if wind.wind700 is None or wind.wind500 is None:
        return None
    return abs(wind.wind700 - wind.wind500)


def compute_risk(
    drift_kmh: Optional[float],
    heading_deg: Optional[float],
    wind: WindSample | None = None,
) -> Optional[int]:
    """Combine drift, heading-vs-wind mismatch and shear into a 0..100 score.

    Returns ``None`` when there is no drift estimate. Missing wind inputs
    contribute zero rather than suppressing the score.
    """

    if drift_kmh is None:
        return None
    wind = wind or WindSample()

    mismatch = angle_delta(heading_deg, preferred_wind_direction(wind))
    shear = wind_shear(wind)

    d = _clamp01(drift_kmh / DRIFT_CAP_KMH)
    m = _clamp01(mismatch / MISMATCH_CAP_DEG) if mismatch is not None else 0.0
    s = _clamp01(shear / SHEAR_CAP) if shear is not None else 0.0

    score = (DRIFT_WEIGHT * d + MISMATCH_WEIGHT * m + SHEAR_WEIGHT * s) * 100
    # half-up, not banker's rounding
    return int(math.floor(score + 0.5))


__all__ = ["compute_risk", "preferred_wind_direction", "wind_shear"]
