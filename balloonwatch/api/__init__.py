"""API routers for the BalloonWatch service."""

from fastapi import APIRouter

from .health import router as health_router
from .relay import router as relay_router
from .tracks import router as tracks_router
from .view import router as view_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(tracks_router)
api_router.include_router(view_router)
api_router.include_router(relay_router)

__all__ = ["api_router"]
