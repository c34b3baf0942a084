"""SQLAlchemy models for access control.

Tables:
- email_whitelist: Emails permitted to use the application
"""

from typing import Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from ..db.models import Base, generate_uuid, utcnow_iso


class EmailWhitelistEntry(Base):
    """Allow-list entry; emails are stored lowercased."""

    __tablename__ = "email_whitelist"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)

    # Admin who added the entry; null for entries added from the CLI
    added_by: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL")
    )

    created_at: Mapped[str] = mapped_column(String(32), default=utcnow_iso)
    updated_at: Mapped[str] = mapped_column(String(32), default=utcnow_iso, onupdate=utcnow_iso)

    def __repr__(self) -> str:
        return f"<EmailWhitelistEntry(email={self.email})>"
