"""Lookback-window projections over published trajectories."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from balloonwatch.models.tracks import Point, Trajectory, WindowedTrack
from balloonwatch.services.trajectories import last_hop

MIN_WINDOW_HOURS = 1
MAX_WINDOW_HOURS = 24


def clamp_window_hours(hours: int) -> int:
    return max(MIN_WINDOW_HOURS, min(MAX_WINDOW_HOURS, int(hours)))


def cutoff_for_hours(now: int, hours: int) -> int:
    return now - hours * 3600


def window_points(points: Sequence[Point], cutoff: int) -> list[Point]:
    return [p for p in points if p.timestamp >= cutoff]


def windowed_view(track: Trajectory, cutoff: int) -> WindowedTrack:
    """Project a trajectory onto ``[cutoff, now]``.

    Speed and bearing come from the last hop inside the window; with fewer
    than two windowed fixes the full-history drift and heading are reported.
    Staleness and gap flags always describe the full history.
    """

    points = window_points(track.points, cutoff)
    hop = last_hop(points)
    return WindowedTrack(
        id=track.id,
        points=points,
        speed_kmh=hop.speed_kmh if hop else track.drift_kmh,
        bearing_deg=hop.bearing_deg if hop else track.heading_deg,
        drift_kmh=track.drift_kmh,
        heading_deg=track.heading_deg,
        risk=track.risk,
        wind700=track.wind700,
        dir700=track.dir700,
        wind500=track.wind500,
        dir500=track.dir500,
        stale=track.stale,
        age_label=track.age_label,
        gap_km=track.gap_km,
        gap=track.gap,
    )


def window_tracks(
    tracks: Iterable[Trajectory],
    cutoff: int,
    *,
    pinned_id: Optional[str] = None,
) -> list[WindowedTrack]:
    """Windowed views of tracks with at least one fix in the window.

    The pinned track is moved to the end so clients draw it last.
    """

    views = [windowed_view(track, cutoff) for track in tracks]
    visible = [view for view in views if view.points and view.id != pinned_id]
    pinned = next((v for v in views if v.id == pinned_id and v.points), None)
    if pinned is not None:
        visible.append(pinned)
    return visible


__all__ = [
    "MAX_WINDOW_HOURS",
    "MIN_WINDOW_HOURS",
    "clamp_window_hours",
    "cutoff_for_hours",
    "window_points",
    "window_tracks",
    "windowed_view",
]
