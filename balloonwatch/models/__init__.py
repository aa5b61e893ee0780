"""Pydantic models for the BalloonWatch service."""

from .tracks import (
    EnrichmentResult,
    IngestStats,
    Point,
    RefreshResponse,
    StatsResponse,
    TrackListResponse,
    Trajectory,
    WindSample,
    WindowResponse,
    WindowedTrack,
)
from .view import ViewState, ViewUpdate

__all__ = [
    "EnrichmentResult",
    "IngestStats",
    "Point",
    "RefreshResponse",
    "StatsResponse",
    "TrackListResponse",
    "Trajectory",
    "ViewState",
    "ViewUpdate",
    "WindSample",
    "WindowResponse",
    "WindowedTrack",
]
