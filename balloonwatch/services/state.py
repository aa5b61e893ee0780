"""In-memory application state shared by the pipeline and the API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from typing import Mapping, Optional

from balloonwatch.config import settings
from balloonwatch.models.tracks import EnrichmentResult, IngestStats, Trajectory
from balloonwatch.models.view import ViewState
from balloonwatch.services.enrichment import merge_enrichment
from balloonwatch.services.windowing import MAX_WINDOW_HOURS, clamp_window_hours

logger = logging.getLogger("balloonwatch.state")


@dataclass(frozen=True)
class TrackSnapshot:
    """One published ingestion cycle."""

    cycle: int = 0
    tracks: tuple[Trajectory, ...] = ()
    stats: IngestStats = field(default_factory=IngestStats)
    updated_at: Optional[datetime] = None

    def get(self, object_id: str) -> Optional[Trajectory]:
        return next((t for t in self.tracks if t.id == object_id), None)


class AppState:
    """Owns the published snapshot and the view state.

    Every change goes through one of the transition methods. The snapshot is
    replaced as a whole, never mutated, so readers always see a consistent
    cycle.
    """

    def __init__(self, *, default_window_hours: int | None = None) -> None:
        self.default_window_hours = clamp_window_hours(
            default_window_hours or settings.default_window_hours
        )
        self.snapshot = TrackSnapshot()
        self.window_hours = self.default_window_hours
        self.pinned_id: Optional[str] = None
        self.playing = False

    def publish(self, tracks: list[Trajectory], stats: IngestStats) -> int:
        cycle = self.snapshot.cycle + 1
        self.snapshot = TrackSnapshot(
            cycle=cycle,
            tracks=tuple(tracks),
            stats=stats,
            updated_at=datetime.now(tz=timezone.utc),
        )
        logger.info("Published cycle %s with %s tracks", cycle, len(tracks))
        return cycle

    def apply_enrichment(self, results: Mapping[str, EnrichmentResult]) -> int:
        """Merge enrichment results by id into whatever snapshot is current."""

        current = self.snapshot
        matched = sum(1 for t in current.tracks if t.id in results)
        self.snapshot = TrackSnapshot(
            cycle=current.cycle,
            tracks=tuple(merge_enrichment(current.tracks, results)),
            stats=current.stats,
            updated_at=current.updated_at,
        )
        if matched < len(results):
            logger.debug(
                "Dropped %s enrichment results for ids no longer published",
                len(results) - matched,
            )
        return matched

    def set_window(self, hours: int) -> int:
        self.window_hours = clamp_window_hours(hours)
        return self.window_hours

    def pin(self, object_id: Optional[str]) -> None:
        self.pinned_id = object_id or None

    def set_playing(self, playing: bool) -> None:
        self.playing = playing

    def advance_playback(self, step_hours: int | None = None) -> int:
        """Step the lookback window down, wrapping back to the default."""

        step = settings.playback_step_hours if step_hours is None else step_hours
        if self.window_hours > 1:
            self.window_hours = clamp_window_hours(self.window_hours - step)
        else:
            self.window_hours = min(self.default_window_hours, MAX_WINDOW_HOURS)
        return self.window_hours

    def view(self) -> ViewState:
        return ViewState(
            window_hours=self.window_hours,
            pinned_id=self.pinned_id,
            playing=self.playing,
        )


_default_state = AppState()


def get_app_state() -> AppState:
    """FastAPI dependency returning the process-wide state."""

    return _default_state


__all__ = ["AppState", "TrackSnapshot", "get_app_state"]
