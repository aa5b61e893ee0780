"""Configuration settings for the BalloonWatch service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("balloonwatch.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    balloonwatch_env: str = os.getenv("BALLOONWATCH_ENV", "local")
    log_level: str = os.getenv("BALLOONWATCH_LOG_LEVEL", "INFO")

    # Hourly snapshot source
    snapshot_base_url: str = os.getenv(
        "SNAPSHOT_BASE_URL", "https://a.windbornesystems.com/treasure"
    )
    snapshot_timeout: float = float(os.getenv("SNAPSHOT_TIMEOUT", "10.0"))
    snapshot_hours: int = int(os.getenv("SNAPSHOT_HOURS", "24"))

    # Wind enrichment (Open-Meteo)
    wind_base_url: str = os.getenv(
        "WIND_BASE_URL", "https://api.open-meteo.com/v1/forecast"
    )
    wind_timeout: float = float(os.getenv("WIND_TIMEOUT", "10.0"))
    enrich_subset: int = int(os.getenv("ENRICH_SUBSET", "50"))
    enrich_batch: int = int(os.getenv("ENRICH_BATCH", "25"))

    # Diagnostics thresholds
    stale_after_sec: int = int(os.getenv("STALE_AFTER_SEC", "3600"))
    gap_km: float = float(os.getenv("GAP_KM", "300"))

    # Refresh cycle
    refresh_interval_sec: float = float(os.getenv("REFRESH_INTERVAL_SEC", "300"))
    enable_refresh_scheduler: bool = _get_bool("ENABLE_REFRESH_SCHEDULER", True)

    # Lookback window and playback
    default_window_hours: int = int(os.getenv("DEFAULT_WINDOW_HOURS", "24"))
    playback_step_hours: int = int(os.getenv("PLAYBACK_STEP_HOURS", "1"))
    playback_tick_sec: float = float(os.getenv("PLAYBACK_TICK_SEC", "0.8"))
    watchlist_limit: int = int(os.getenv("WATCHLIST_LIMIT", "100"))

    # Upstream relay
    relay_upstream_url: str = os.getenv(
        "RELAY_UPSTREAM_URL", "https://a.windbornesystems.com"
    )
    relay_timeout: float = float(os.getenv("RELAY_TIMEOUT", "15.0"))


settings = Settings()

if settings.enrich_batch < 1:
    logger.warning("ENRICH_BATCH must be positive; falling back to 1")
    settings.enrich_batch = 1

__all__ = ["settings", "Settings"]
