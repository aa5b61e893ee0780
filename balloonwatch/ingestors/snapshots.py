"""Hourly balloon position snapshots from the WindBorne treasure feed."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
import logging
import math
import time
from typing import Any, Optional

import httpx

from balloonwatch.config import settings
from balloonwatch.models.tracks import IngestStats, Point

logger = logging.getLogger("balloonwatch.ingestors.snapshots")

ID_KEYS = ("id", "balloon_id", "identifier", "name", "ID")
LAT_KEYS = ("lat", "latitude")
LON_KEYS = ("lon", "lng", "longitude")
TIME_KEYS = ("ts", "timestamp", "time")

SECONDS_PER_HOUR = 3600


class RowShape(str, Enum):
    """Layouts a snapshot row may arrive in."""

    KEYED = "keyed"
    POSITIONAL = "positional"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class NormalizedRow:
    """A snapshot row reduced to an object id and a position fix."""

    id: str
    point: Point


GroupedPoints = dict[str, list[Point]]


def classify_row(raw_row: Any) -> RowShape:
    if isinstance(raw_row, Mapping):
        return RowShape.KEYED
    if isinstance(raw_row, (list, tuple)) and len(raw_row) >= 2:
        return RowShape.POSITIONAL
    return RowShape.UNSUPPORTED


def _first_present(row: Mapping, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _parse_timestamp(raw_ts: Any) -> int | None:
    """Epoch seconds from a numeric value or an ISO-8601 string."""

    number = _to_float(raw_ts)
    if number is not None:
        return int(number)
    if isinstance(raw_ts, str):
        text = raw_ts.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Unparseable snapshot timestamp: %s", raw_ts)
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return int(parsed.timestamp())
    return None


def _make_point(lat: float | None, lon: float | None, ts: int) -> Point | None:
    if lat is None or lon is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return Point(lat=lat, lon=lon, timestamp=ts)


def normalize_row(
    raw_row: Any, hour_index: int, row_index: int, now: int | None = None
) -> Optional[NormalizedRow]:
    """Convert one raw snapshot row into a ``NormalizedRow`` or reject it.

    Keyed rows are searched for id, coordinate and time fields under several
    spellings. Positional rows are ``[lat, lon, ...]`` and never carry an id or
    a timestamp. Missing ids become ``b<row_index>`` and missing timestamps are
    synthesized from the hour offset, so both are approximations: the same
    physical balloon can land under different ids in different hours.
    """

    if now is None:
        now = int(time.time())
    synthesized_ts = now - hour_index * SECONDS_PER_HOUR
    fallback_id = f"b{row_index}"

    shape = classify_row(raw_row)
    if shape is RowShape.KEYED:
        raw_id = _first_present(raw_row, ID_KEYS)
        object_id = str(raw_id) if raw_id is not None else fallback_id
        lat = _to_float(_first_present(raw_row, LAT_KEYS))
        lon = _to_float(_first_present(raw_row, LON_KEYS))
        ts = _parse_timestamp(_first_present(raw_row, TIME_KEYS))
        point = _make_point(lat, lon, ts if ts is not None else synthesized_ts)
    elif shape is RowShape.POSITIONAL:
        object_id = fallback_id
        point = _make_point(_to_float(raw_row[0]), _to_float(raw_row[1]), synthesized_ts)
    else:
        return None

    if point is None:
        return None
    return NormalizedRow(id=object_id, point=point)


class SnapshotIngestor:
    """Fetch the trailing window of hourly snapshots and normalize every row."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        hours: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.snapshot_base_url).rstrip("/")
        self.timeout = timeout or settings.snapshot_timeout
        self.hours = hours or settings.snapshot_hours
        self.transport = transport

    def hour_url(self, hour_index: int) -> str:
        return f"{self.base_url}/{hour_index:02d}.json"

    async def fetch_window(
        self, now: int | None = None
    ) -> tuple[GroupedPoints, IngestStats]:
        """Fetch every hour concurrently and group accepted points by object id.

        A failed hour contributes nothing; the call itself never raises for
        upstream problems.
        """

        if now is None:
            now = int(time.time())

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            hourly_rows = await asyncio.gather(
                *(self._fetch_hour(client, hour) for hour in range(self.hours))
            )

        grouped: GroupedPoints = {}
        raw_rows = 0
        kept_rows = 0
        for hour_index, rows in enumerate(hourly_rows):
            if rows is None:
                continue
            raw_rows += len(rows)
            for row_index, raw in enumerate(rows):
                normalized = normalize_row(raw, hour_index, row_index, now=now)
                if normalized is None:
                    logger.debug("Rejected row %s of hour %02d", row_index, hour_index)
                    continue
                kept_rows += 1
                grouped.setdefault(normalized.id, []).append(normalized.point)

        stats = IngestStats(
            raw_rows=raw_rows, kept_rows=kept_rows, object_count=len(grouped)
        )
        missing = sum(1 for rows in hourly_rows if rows is None)
        logger.info(
            "Snapshot window ingested: hours=%s missing=%s raw=%s kept=%s objects=%s",
            self.hours,
            missing,
            stats.raw_rows,
            stats.kept_rows,
            stats.object_count,
        )
        return grouped, stats

    async def _fetch_hour(
        self, client: httpx.AsyncClient, hour_index: int
    ) -> list[Any] | None:
        url = self.hour_url(hour_index)
        try:
            response = await client.get(url)
        except httpx.TimeoutException as exc:
            logger.warning("Snapshot %02d timed out: %s", hour_index, exc)
            return None
        except httpx.RequestError as exc:
            logger.warning("Snapshot %02d request failed: %s", hour_index, exc)
            return None

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Snapshot %02d returned HTTP %s", hour_index, exc.response.status_code
            )
            return None

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Snapshot %02d is not valid JSON: %s", hour_index, exc)
            return None

        if not isinstance(payload, list):
            logger.warning(
                "Snapshot %02d body is %s, expected a list",
                hour_index,
                type(payload).__name__,
            )
            return None
        return payload


__all__ = [
    "GroupedPoints",
    "NormalizedRow",
    "RowShape",
    "SnapshotIngestor",
    "classify_row",
    "normalize_row",
]
