"""SQLAlchemy models for Kindle import history.

Tables:
- kindle_sync_log: One row per import run
"""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..db.models import Base, generate_uuid, utcnow_iso
from .schemas import SyncStatus


class KindleSyncLog(Base):
    """Summary of a single Kindle import run."""

    __tablename__ = "kindle_sync_log"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    synced_at: Mapped[str] = mapped_column(String(32), default=utcnow_iso, index=True)

    quotes_added: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    quotes_duplicated: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    quotes_skipped: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    status: Mapped[str] = mapped_column(String(10), default=SyncStatus.SUCCESS.value, nullable=False)
    error_message: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[str] = mapped_column(String(32), default=utcnow_iso)

    def __repr__(self) -> str:
        return f"<KindleSyncLog(id={self.id}, status={self.status})>"
