"""Models for balloon positions, trajectories and wind enrichment."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Point(BaseModel):
    """A single position fix."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in decimal degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in decimal degrees")
    timestamp: int = Field(..., description="Fix time in epoch seconds")

    model_config = ConfigDict(frozen=True)


class IngestStats(BaseModel):
    """Row accounting for one ingestion cycle."""

    raw_rows: int = Field(default=0, description="Rows received across all hours")
    kept_rows: int = Field(default=0, description="Rows accepted by normalization")
    object_count: int = Field(default=0, description="Distinct object ids")

    model_config = ConfigDict(frozen=True)


class WindSample(BaseModel):
    """Most recent winds aloft at a location; absent values were not supplied."""

    wind700: Optional[float] = Field(default=None, description="Wind speed at 700 hPa")
    dir700: Optional[float] = Field(default=None, description="Wind direction at 700 hPa (deg)")
    wind500: Optional[float] = Field(default=None, description="Wind speed at 500 hPa")
    dir500: Optional[float] = Field(default=None, description="Wind direction at 500 hPa (deg)")

    model_config = ConfigDict(frozen=True)

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (self.wind700, self.dir700, self.wind500, self.dir500)
        )


class EnrichmentResult(WindSample):
    """Wind sample plus the risk score derived from it."""

    risk: Optional[int] = Field(default=None, ge=0, le=100, description="Risk score 0..100")


class Trajectory(BaseModel):
    """Ordered point history and derived diagnostics for one tracked object."""

    id: str = Field(..., description="Object identifier")
    points: list[Point] = Field(default_factory=list, description="Fixes, oldest first")
    drift_kmh: Optional[float] = Field(default=None, description="Last-hop ground speed")
    heading_deg: Optional[float] = Field(default=None, description="Last-hop bearing")
    risk: Optional[int] = Field(default=None, description="Risk score 0..100")
    wind700: Optional[float] = None
    dir700: Optional[float] = None
    wind500: Optional[float] = None
    dir500: Optional[float] = None
    stale: bool = Field(default=False, description="Last fix older than the stale threshold")
    age_sec: Optional[int] = Field(default=None, description="Seconds since the last fix")
    age_label: str = Field(default="—", description="Compact age label")
    gap_km: float = Field(default=0.0, description="Last-hop distance in km")
    gap: bool = Field(default=False, description="Last hop exceeds the gap threshold")

    @property
    def last_point(self) -> Optional[Point]:
        return self.points[-1] if self.points else None


class WindowedTrack(BaseModel):
    """A trajectory projected onto a lookback window."""

    id: str
    points: list[Point] = Field(default_factory=list, description="Fixes inside the window")
    speed_kmh: Optional[float] = Field(default=None, description="Windowed last-hop speed")
    bearing_deg: Optional[float] = Field(default=None, description="Windowed last-hop bearing")
    drift_kmh: Optional[float] = Field(default=None, description="Full-history drift")
    heading_deg: Optional[float] = Field(default=None, description="Full-history heading")
    risk: Optional[int] = None
    wind700: Optional[float] = None
    dir700: Optional[float] = None
    wind500: Optional[float] = None
    dir500: Optional[float] = None
    stale: bool = False
    age_label: str = "—"
    gap_km: float = 0.0
    gap: bool = False


class TrackListResponse(BaseModel):
    """Published trajectory set with summary counters."""

    cycle: int = Field(..., description="Ingestion cycle that produced the set")
    updated_at: Optional[datetime] = Field(default=None, description="Publish time (UTC)")
    stats: IngestStats
    count: int
    stale_count: int
    gap_count: int
    tracks: list[Trajectory]


class StatsResponse(BaseModel):
    cycle: int
    updated_at: Optional[datetime] = None
    stats: IngestStats
    enriched_count: int = Field(..., description="Tracks carrying a risk score")


class WindowResponse(BaseModel):
    window_hours: int
    cutoff: int = Field(..., description="Earliest timestamp kept (epoch seconds)")
    count: int
    tracks: list[WindowedTrack]


class RefreshResponse(BaseModel):
    status: str = Field(..., description="completed or skipped")
    cycle: int
    stats: IngestStats


__all__ = [
    "EnrichmentResult",
    "IngestStats",
    "Point",
    "RefreshResponse",
    "StatsResponse",
    "TrackListResponse",
    "Trajectory",
    "WindSample",
    "WindowResponse",
    "WindowedTrack",
]
