"""Per-object trajectory assembly and last-hop diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Mapping, Optional, Sequence

from balloonwatch.config import settings
from balloonwatch.domain.geo import bearing_deg, haversine_km
from balloonwatch.models.tracks import Point, Trajectory

logger = logging.getLogger("balloonwatch.trajectories")

MIN_ELAPSED_HOURS = 1e-6


@dataclass
class Kinematics:
    """Last-hop motion and freshness diagnostics for one trajectory."""

    drift_kmh: Optional[float] = None
    heading_deg: Optional[float] = None
    age_sec: Optional[int] = None
    stale: bool = False
    gap_km: float = 0.0
    gap: bool = False


@dataclass
class LastHop:
    distance_km: float
    speed_kmh: float
    bearing_deg: float


def dedupe_and_sort(points: Sequence[Point]) -> list[Point]:
    """Sort by timestamp and keep the first fix seen for each timestamp."""

    ordered = sorted(points, key=lambda p: p.timestamp)
    kept: list[Point] = []
    for point in ordered:
        if kept and kept[-1].timestamp == point.timestamp:
            continue
        kept.append(point)
    return kept


def build_trajectories(grouped: Mapping[str, Sequence[Point]]) -> dict[str, list[Point]]:
    return {object_id: dedupe_and_sort(points) for object_id, points in grouped.items()}


def last_hop(points: Sequence[Point]) -> Optional[LastHop]:
    """Distance, speed and bearing between the two most recent fixes."""

    if len(points) < 2:
        return None
    prev, last = points[-2], points[-1]
    distance_km = haversine_km(prev.lat, prev.lon, last.lat, last.lon)
    elapsed_h = max((last.timestamp - prev.timestamp) / 3600, MIN_ELAPSED_HOURS)
    return LastHop(
        distance_km=distance_km,
        speed_kmh=distance_km / elapsed_h,
        bearing_deg=bearing_deg(prev.lat, prev.lon, last.lat, last.lon),
    )


def derive_kinematics(
    points: Sequence[Point],
    now: int,
    *,
    stale_after_sec: int | None = None,
    gap_km_threshold: float | None = None,
) -> Kinematics:
    stale_after = settings.stale_after_sec if stale_after_sec is None else stale_after_sec
    gap_threshold = settings.gap_km if gap_km_threshold is None else gap_km_threshold

    result = Kinematics()
    if not points:
        return result

    result.age_sec = max(0, now - points[-1].timestamp)
    result.stale = result.age_sec > stale_after

    hop = last_hop(points)
    if hop is not None:
        result.drift_kmh = hop.speed_kmh
        result.heading_deg = hop.bearing_deg
        result.gap_km = hop.distance_km
        result.gap = hop.distance_km > gap_threshold
    return result


def format_age(age_sec: Optional[float]) -> str:
    if age_sec is None:
        return "—"
    if age_sec < 90:
        return f"{math.floor(age_sec + 0.5)}s"
    minutes = age_sec / 60
    if minutes < 90:
        return f"{math.floor(minutes + 0.5)}m"
    return f"{minutes / 60:.1f}h"


def build_track_set(trajectories: Mapping[str, list[Point]], now: int) -> list[Trajectory]:
    """Wrap built histories into ``Trajectory`` models, preserving id order."""

    tracks: list[Trajectory] = []
    for object_id, points in trajectories.items():
        kin = derive_kinematics(points, now)
        tracks.append(
            Trajectory(
                id=object_id,
                points=points,
                drift_kmh=kin.drift_kmh,
                heading_deg=kin.heading_deg,
                stale=kin.stale,
                age_sec=kin.age_sec,
                age_label=format_age(kin.age_sec),
                gap_km=kin.gap_km,
                gap=kin.gap,
            )
        )
    logger.debug(
        "Built %s tracks (%s stale, %s gaps)",
        len(tracks),
        sum(1 for t in tracks if t.stale),
        sum(1 for t in tracks if t.gap),
    )
    return tracks


__all__ = [
    "Kinematics",
    "LastHop",
    "build_track_set",
    "build_trajectories",
    "dedupe_and_sort",
    "derive_kinematics",
    "format_age",
    "last_hop",
]
