"""Health check endpoint."""

from fastapi import APIRouter, Depends

from balloonwatch.config import settings
from balloonwatch.services import AppState, get_app_state

router = APIRouter()


@router.get("/healthz", summary="Health check")
def health_check(state: AppState = Depends(get_app_state)) -> dict[str, str | int]:
    """Simple health check endpoint."""
    return {"status": "ok", "env": settings.balloonwatch_env, "cycle": state.snapshot.cycle}
