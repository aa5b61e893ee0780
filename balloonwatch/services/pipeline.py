"""One ingestion cycle: fetch, build, publish, enrich, merge."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import time
from typing import Optional

from balloonwatch.config import settings
from balloonwatch.ingestors import SnapshotIngestor, WindIngestor
from balloonwatch.models.tracks import IngestStats
from balloonwatch.services.enrichment import WindSource, enrich
from balloonwatch.services.state import AppState, get_app_state
from balloonwatch.services.trajectories import build_track_set, build_trajectories

logger = logging.getLogger("balloonwatch.pipeline")


@dataclass
class CycleResult:
    """Outcome of a requested ingestion cycle."""

    status: str
    cycle: int
    stats: IngestStats


class IngestionPipeline:
    """Runs ingestion cycles against an ``AppState``.

    Cycles do not overlap: a cycle requested while another is running is
    skipped and reports the currently published snapshot.
    """

    def __init__(
        self,
        *,
        state: AppState,
        snapshot_ingestor: Optional[SnapshotIngestor] = None,
        wind_source: Optional[WindSource] = None,
        enrich_subset: int | None = None,
        enrich_batch: int | None = None,
    ) -> None:
        self.state = state
        self.snapshot_ingestor = snapshot_ingestor or SnapshotIngestor()
        self.wind_source = wind_source or WindIngestor()
        self.enrich_subset = settings.enrich_subset if enrich_subset is None else enrich_subset
        self.enrich_batch = settings.enrich_batch if enrich_batch is None else enrich_batch
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def run_cycle(self, now: int | None = None) -> CycleResult:
        if self._lock.locked():
            logger.info("Ingestion cycle already in progress; skipping")
            snapshot = self.state.snapshot
            return CycleResult(status="skipped", cycle=snapshot.cycle, stats=snapshot.stats)

        async with self._lock:
            started = time.monotonic()
            if now is None:
                now = int(time.time())

            grouped, stats = await self.snapshot_ingestor.fetch_window(now=now)
            tracks = build_track_set(build_trajectories(grouped), now)
            cycle = self.state.publish(tracks, stats)

            results = await enrich(
                tracks,
                wind_source=self.wind_source,
                subset_size=self.enrich_subset,
                batch_size=self.enrich_batch,
            )
            self.state.apply_enrichment(results)

            logger.info(
                "Cycle %s finished in %.2f s: objects=%s enriched=%s",
                cycle,
                time.monotonic() - started,
                stats.object_count,
                len(results),
            )
            return CycleResult(status="completed", cycle=cycle, stats=stats)


_default_pipeline: IngestionPipeline | None = None


def get_pipeline() -> IngestionPipeline:
    """FastAPI dependency returning the process-wide pipeline."""

    global _default_pipeline
    if _default_pipeline is None:
        _default_pipeline = IngestionPipeline(state=get_app_state())
    return _default_pipeline


__all__ = ["CycleResult", "IngestionPipeline", "get_pipeline"]
