"""Winds aloft lookup using Open-Meteo."""

from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from balloonwatch.config import settings
from balloonwatch.models.tracks import WindSample

logger = logging.getLogger("balloonwatch.ingestors.winds")

HOURLY_FIELDS = (
    "windspeed_700hPa",
    "winddirection_700hPa",
    "windspeed_500hPa",
    "winddirection_500hPa",
)


def _series_value(hourly: dict, key: str, index: int) -> float | None:
    series = hourly.get(key)
    if not isinstance(series, list) or index >= len(series):
        return None
    value = series[index]
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def parse_wind_payload(payload: Any) -> WindSample:
    """Read the most recent hourly entry of each pressure-level series."""

    if not isinstance(payload, dict):
        return WindSample()
    hourly = payload.get("hourly")
    if not isinstance(hourly, dict):
        return WindSample()
    times = hourly.get("time")
    if not isinstance(times, list) or not times:
        return WindSample()

    last = len(times) - 1
    return WindSample(
        wind700=_series_value(hourly, "windspeed_700hPa", last),
        dir700=_series_value(hourly, "winddirection_700hPa", last),
        wind500=_series_value(hourly, "windspeed_500hPa", last),
        dir500=_series_value(hourly, "winddirection_500hPa", last),
    )


class WindIngestor:
    """Fetch 700/500 hPa wind speed and direction for a location.

    Every failure mode degrades to an empty ``WindSample`` so a single bad
    lookup cannot disturb the rest of an enrichment batch.
    """

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.wind_base_url
        self.timeout = timeout or settings.wind_timeout
        self.transport = transport

    async def get_winds(self, lat: float, lon: float) -> WindSample:
        params = {
            "latitude": lat,
            "longitude": lon,
            "hourly": ",".join(HOURLY_FIELDS),
            "timezone": "UTC",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(self.base_url, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("Wind request timed out: %s", exc)
            return WindSample()
        except httpx.RequestError as exc:
            logger.warning("Wind request failed: %s", exc)
            return WindSample()

        if response.status_code == 429:
            logger.warning("Wind provider rate limit encountered at %.3f,%.3f", lat, lon)
            return WindSample()
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Wind provider returned HTTP %s: %s", exc.response.status_code, exc
            )
            return WindSample()

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse wind JSON response: %s", exc)
            return WindSample()

        sample = parse_wind_payload(payload)
        logger.debug("Wind sample at %.3f,%.3f: %s", lat, lon, sample)
        return sample


__all__ = ["WindIngestor", "parse_wind_payload"]
