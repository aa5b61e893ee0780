"""Tabular export of windowed tracks."""

from __future__ import annotations

import csv
import io
from typing import Any, Iterable

from balloonwatch.models.tracks import WindowedTrack

EXPORT_COLUMNS = ("id", "lat", "lon", "speed_kmh", "bearing_deg", "risk", "stale")


def _fmt(value: float | None) -> str:
    return f"{value:.1f}" if value is not None else ""


def export_rows(tracks: Iterable[WindowedTrack]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for track in tracks:
        last = track.points[-1] if track.points else None
        rows.append(
            {
                "id": track.id,
                "lat": last.lat if last else "",
                "lon": last.lon if last else "",
                "speed_kmh": _fmt(track.drift_kmh),
                "bearing_deg": _fmt(track.heading_deg),
                "risk": track.risk if track.risk is not None else "",
                "stale": "TRUE" if track.stale else "FALSE",
            }
        )
    return rows


def render_csv(rows: Iterable[dict[str, Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


__all__ = ["EXPORT_COLUMNS", "export_rows", "render_csv"]
