"""View state models shared with the map client."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ViewState(BaseModel):
    """Lookback window, pinned object and playback flag."""

    window_hours: int = Field(..., description="Lookback window in hours")
    pinned_id: Optional[str] = Field(default=None, description="Pinned object id")
    playing: bool = Field(default=False, description="Whether playback is running")


class ViewUpdate(BaseModel):
    """Partial update of the view state; omitted fields are left unchanged."""

    window_hours: Optional[int] = Field(
        default=None, ge=1, le=24, description="Lookback window in hours",
    )
    pinned_id: Optional[str] = Field(
        default=None, description="Object id to pin; empty string unpins",
    )
    playing: Optional[bool] = Field(default=None, description="Start or stop playback")


__all__ = ["ViewState", "ViewUpdate"]
