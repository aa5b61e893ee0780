"""Batched wind enrichment and risk scoring for a subset of trajectories."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Mapping, Protocol, Sequence

from balloonwatch.config import settings
from balloonwatch.domain.risk import compute_risk
from balloonwatch.models.tracks import EnrichmentResult, Trajectory, WindSample

logger = logging.getLogger("balloonwatch.enrichment")


class WindSource(Protocol):
    """Anything that can report winds aloft for a coordinate."""

    async def get_winds(self, lat: float, lon: float) -> WindSample:
        """Return the latest winds, or an empty sample when unavailable."""


def batched(items: Sequence[Trajectory], size: int) -> Iterable[Sequence[Trajectory]]:
    size = max(size, 1)
    for start in range(0, len(items), size):
        yield items[start : start + size]


async def enrich_track(track: Trajectory, wind_source: WindSource) -> EnrichmentResult:
    last = track.last_point
    wind = WindSample() if last is None else await wind_source.get_winds(last.lat, last.lon)
    risk = compute_risk(track.drift_kmh, track.heading_deg, wind)
    return EnrichmentResult(**wind.model_dump(), risk=risk)


async def enrich(
    trajectories: Sequence[Trajectory],
    *,
    wind_source: WindSource,
    subset_size: int | None = None,
    batch_size: int | None = None,
) -> dict[str, EnrichmentResult]:
    """Enrich the first ``subset_size`` trajectories in batches of ``batch_size``.

    Calls inside a batch run concurrently; a batch only starts once every
    call of the previous one has settled. A task that raises is logged and
    left out of the result without touching its siblings.
    """

    subset_size = settings.enrich_subset if subset_size is None else subset_size
    batch_size = settings.enrich_batch if batch_size is None else batch_size
    subset = list(trajectories[: max(subset_size, 0)])

    results: dict[str, EnrichmentResult] = {}
    for batch_number, batch in enumerate(batched(subset, batch_size), start=1):
        outcomes = await asyncio.gather(
            *(enrich_track(track, wind_source) for track in batch),
            return_exceptions=True,
        )
        for track, outcome in zip(batch, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("Enrichment failed for %s: %s", track.id, outcome)
                continue
            results[track.id] = outcome
        logger.debug("Enrichment batch %s settled (%s tracks)", batch_number, len(batch))

    logger.info("Enriched %s of %s tracks", len(results), len(trajectories))
    return results


def merge_enrichment(
    trajectories: Iterable[Trajectory], results: Mapping[str, EnrichmentResult]
) -> list[Trajectory]:
    """Patch wind and risk fields by object id; unmatched tracks pass through."""

    merged: list[Trajectory] = []
    for track in trajectories:
        patch = results.get(track.id)
        merged.append(track if patch is None else track.model_copy(update=patch.model_dump()))
    return merged


__all__ = ["WindSource", "batched", "enrich", "enrich_track", "merge_enrichment"]
