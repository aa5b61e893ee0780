"""Service-layer helpers for BalloonWatch."""

from .enrichment import WindSource, enrich, enrich_track, merge_enrichment
from .export import EXPORT_COLUMNS, export_rows, render_csv
from .pipeline import CycleResult, IngestionPipeline, get_pipeline
from .scheduler import PeriodicTask
from .state import AppState, TrackSnapshot, get_app_state
from .trajectories import (
    Kinematics,
    build_track_set,
    build_trajectories,
    derive_kinematics,
    format_age,
)
from .windowing import cutoff_for_hours, window_points, window_tracks, windowed_view

__all__ = [
    "AppState",
    "CycleResult",
    "EXPORT_COLUMNS",
    "IngestionPipeline",
    "Kinematics",
    "PeriodicTask",
    "TrackSnapshot",
    "WindSource",
    "build_track_set",
    "build_trajectories",
    "cutoff_for_hours",
    "derive_kinematics",
    "enrich",
    "enrich_track",
    "export_rows",
    "format_age",
    "get_app_state",
    "get_pipeline",
    "merge_enrichment",
    "render_csv",
    "window_points",
    "window_tracks",
    "windowed_view",
]
