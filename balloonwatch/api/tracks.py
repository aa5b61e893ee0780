"""Read endpoints over the published trajectory set."""

from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from balloonwatch.config import settings
from balloonwatch.models import (
    RefreshResponse,
    StatsResponse,
    TrackListResponse,
    Trajectory,
    WindowResponse,
)
from balloonwatch.services import (
    AppState,
    IngestionPipeline,
    cutoff_for_hours,
    export_rows,
    get_app_state,
    get_pipeline,
    render_csv,
    window_tracks,
)
from balloonwatch.services.windowing import clamp_window_hours

router = APIRouter(prefix="/api/v1", tags=["tracks"])

logger = logging.getLogger("balloonwatch.tracks")


def _windowed(state: AppState, hours: Optional[int]):
    window_hours = clamp_window_hours(hours if hours is not None else state.window_hours)
    cutoff = cutoff_for_hours(int(time.time()), window_hours)
    tracks = window_tracks(state.snapshot.tracks, cutoff, pinned_id=state.pinned_id)
    return window_hours, cutoff, tracks


@router.get("/tracks", response_model=TrackListResponse, summary="List all trajectories")
def list_tracks(state: AppState = Depends(get_app_state)) -> TrackListResponse:
    snapshot = state.snapshot
    tracks = list(snapshot.tracks)
    return TrackListResponse(
        cycle=snapshot.cycle,
        updated_at=snapshot.updated_at,
        stats=snapshot.stats,
        count=len(tracks),
        stale_count=sum(1 for t in tracks if t.stale),
        gap_count=sum(1 for t in tracks if t.gap),
        tracks=tracks,
    )


@router.get("/tracks/{object_id}", response_model=Trajectory, summary="Get one trajectory")
def get_track(object_id: str, state: AppState = Depends(get_app_state)) -> Trajectory:
    track = state.snapshot.get(object_id)
    if track is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown object id: {object_id}",
        )
    return track


@router.get("/stats", response_model=StatsResponse, summary="Ingestion statistics")
def get_stats(state: AppState = Depends(get_app_state)) -> StatsResponse:
    snapshot = state.snapshot
    return StatsResponse(
        cycle=snapshot.cycle,
        updated_at=snapshot.updated_at,
        stats=snapshot.stats,
        enriched_count=sum(1 for t in snapshot.tracks if t.risk is not None),
    )


@router.get("/window", response_model=WindowResponse, summary="Tracks inside a lookback window")
def get_window(
    hours: Optional[int] = Query(
        default=None, ge=1, le=24, description="Lookback in hours; defaults to the view window"
    ),
    state: AppState = Depends(get_app_state),
) -> WindowResponse:
    window_hours, cutoff, tracks = _windowed(state, hours)
    return WindowResponse(
        window_hours=window_hours, cutoff=cutoff, count=len(tracks), tracks=tracks
    )


@router.get(
    "/watchlist", response_model=list[Trajectory], summary="Trajectories ranked by risk"
)
def get_watchlist(
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    state: AppState = Depends(get_app_state),
) -> list[Trajectory]:
    limit = limit or settings.watchlist_limit
    ranked = sorted(
        state.snapshot.tracks,
        key=lambda t: t.risk if t.risk is not None else -1,
        reverse=True,
    )
    return ranked[:limit]


@router.get("/export.csv", summary="Export windowed tracks as CSV")
def export_csv(
    hours: Optional[int] = Query(default=None, ge=1, le=24),
    state: AppState = Depends(get_app_state),
) -> Response:
    _, _, tracks = _windowed(state, hours)
    stamp = time.strftime("%Y-%m-%dT%H-%M-%SZ", time.gmtime())
    return Response(
        content=render_csv(export_rows(tracks)),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="balloons-{stamp}.csv"'},
    )


@router.post("/refresh", response_model=RefreshResponse, summary="Run an ingestion cycle now")
async def refresh(pipeline: IngestionPipeline = Depends(get_pipeline)) -> RefreshResponse:
    result = await pipeline.run_cycle()
    logger.info("On-demand refresh %s (cycle %s)", result.status, result.cycle)
    return RefreshResponse(status=result.status, cycle=result.cycle, stats=result.stats)
