"""Data ingestors for BalloonWatch."""

from .snapshots import NormalizedRow, RowShape, SnapshotIngestor, classify_row, normalize_row
from .winds import WindIngestor, parse_wind_payload

__all__ = [
    "NormalizedRow",
    "RowShape",
    "SnapshotIngestor",
    "WindIngestor",
    "classify_row",
    "normalize_row",
    "parse_wind_payload",
]
