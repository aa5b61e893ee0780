from __future__ import annotations

import asyncio
import contextlib
import logging
import time

from fastapi import FastAPI, Request

from balloonwatch.api import api_router
from balloonwatch.config import settings
from balloonwatch.services import PeriodicTask, get_app_state, get_pipeline

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("balloonwatch")


async def _playback_tick() -> None:
    state = get_app_state()
    if state.playing:
        state.advance_playback()


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown lifecycle."""

    app.state.background_tasks = []
    if settings.enable_refresh_scheduler:
        refresh = PeriodicTask(
            "refresh",
            get_pipeline().run_cycle,
            interval=settings.refresh_interval_sec,
        )
        playback = PeriodicTask(
            "playback",
            _playback_tick,
            interval=settings.playback_tick_sec,
            run_immediately=False,
        )
        app.state.background_tasks = [
            asyncio.create_task(refresh.run()),
            asyncio.create_task(playback.run()),
        ]
        logger.info(
            "Refresh scheduler started (every %.0f s)", settings.refresh_interval_sec
        )
    else:
        logger.info("Refresh scheduler disabled")

    try:
        yield
    finally:
        for task in app.state.background_tasks:
            task.cancel()
        for task in app.state.background_tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task


app = FastAPI(title="BalloonWatch", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log basic request information for observability."""

    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        "HTTP %s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


app.include_router(api_router)


@app.get("/", summary="Root")
def read_root() -> dict[str, str]:
    """Basic root endpoint for quick verification."""

    return {"message": "BalloonWatch is running"}
