"""SQLAlchemy models for quotes.

Tables:
- quotes: Quotes owned by a user and filed in one of their collections
"""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..db.models import Base, generate_uuid, utcnow_iso


class Quote(Base):
    """Quote model - memorable quotes and passages."""

    __tablename__ = "quotes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    # Owner and collection
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    collection_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("collections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Quote content
    text: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[Optional[str]] = mapped_column(String(255))  # Book title, website, ...
    author: Mapped[Optional[str]] = mapped_column(String(255))
    page_number: Mapped[Optional[int]] = mapped_column(Integer)

    # Reading state
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    read_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_read_at: Mapped[Optional[str]] = mapped_column(String(32))

    # Kindle dedup key, unique per user by lookup-before-insert
    kindle_highlight_id: Mapped[Optional[str]] = mapped_column(String(255), index=True)

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(32), default=utcnow_iso, index=True)
    updated_at: Mapped[str] = mapped_column(String(32), default=utcnow_iso, onupdate=utcnow_iso)

    def __repr__(self) -> str:
        return f"<Quote(id={self.id}, collection_id={self.collection_id})>"
