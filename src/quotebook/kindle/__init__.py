"""Kindle highlight import module."""

from .importer import KindleImporter
from .models import KindleSyncLog
from .parser import ParseError, make_highlight_id, parse_clippings, parse_csv_highlights, parse_export
from .schemas import (
    HistoryInput,
    KindleHighlight,
    SyncLogResponse,
    SyncRequest,
    SyncResult,
    SyncStatus,
)

__all__ = [
    "KindleImporter",
    "KindleSyncLog",
    "ParseError",
    "make_highlight_id",
    "parse_clippings",
    "parse_csv_highlights",
    "parse_export",
    "HistoryInput",
    "KindleHighlight",
    "SyncLogResponse",
    "SyncRequest",
    "SyncResult",
    "SyncStatus",
]
