"""View state endpoints (lookback window, pinned object, playback)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from balloonwatch.models import ViewState, ViewUpdate
from balloonwatch.services import AppState, get_app_state

router = APIRouter(prefix="/api/v1", tags=["view"])

logger = logging.getLogger("balloonwatch.view")


@router.get("/view", response_model=ViewState, summary="Current view state")
def get_view(state: AppState = Depends(get_app_state)) -> ViewState:
    return state.view()


@router.put("/view", response_model=ViewState, summary="Update the view state")
def update_view(update: ViewUpdate, state: AppState = Depends(get_app_state)) -> ViewState:
    fields = update.model_fields_set
    if "window_hours" in fields and update.window_hours is not None:
        state.set_window(update.window_hours)
    if "pinned_id" in fields:
        state.pin(update.pinned_id)
    if "playing" in fields and update.playing is not None:
        state.set_playing(update.playing)
    logger.debug("View updated: %s", state.view())
    return state.view()
