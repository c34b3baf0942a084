"""Pydantic schemas for Kindle highlight import."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from ..db.schemas import ApiModel


class SyncStatus(str, Enum):
    """Outcome of an import run."""

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILED = "failed"


class KindleHighlight(ApiModel):
    """A single exported highlight."""

    text: str
    source: Optional[str] = None
    author: Optional[str] = None
    page_number: Optional[int] = None
    kindle_highlight_id: str = Field(..., min_length=1)


class SyncRequest(ApiModel):
    """Input for an import run."""

    highlights: list[KindleHighlight]
    collection_id: str = Field(..., min_length=1)


class SyncResult(ApiModel):
    """Tallies returned to the caller after an import run."""

    added: int = 0
    duplicated: int = 0
    skipped: int = 0
    errors: list[str] = Field(default_factory=list)

    @property
    def status(self) -> SyncStatus:
        return SyncStatus.SUCCESS if not self.errors else SyncStatus.PARTIAL

    @property
    def summary(self) -> str:
        """Get summary string."""
        return (
            f"Added: {self.added}, "
            f"Duplicated: {self.duplicated}, "
            f"Skipped: {self.skipped}"
        )


class HistoryInput(ApiModel):
    """Input for listing past import runs."""

    limit: int = Field(10, ge=1, le=100)


class SyncLogResponse(ApiModel):
    """Schema for import log responses."""

    id: str
    user_id: str
    synced_at: datetime
    quotes_added: int
    quotes_duplicated: int
    quotes_skipped: int
    status: SyncStatus
    error_message: Optional[str]
    created_at: datetime
