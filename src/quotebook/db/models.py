"""SQLAlchemy ORM models shared across modules.

Tables:
- users: Accounts created on first sign-in through the identity provider
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .schemas import UserRole


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utcnow_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class User(Base):
    """User model - one row per identity-provider account."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    # Identity provider subject (uid); upsert key
    identity_id: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)

    name: Mapped[Optional[str]] = mapped_column(Text)
    email: Mapped[Optional[str]] = mapped_column(String(320), index=True)
    login_method: Mapped[Optional[str]] = mapped_column(String(64))
    role: Mapped[str] = mapped_column(String(10), default=UserRole.USER.value, nullable=False)

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(32), default=utcnow_iso)
    updated_at: Mapped[str] = mapped_column(String(32), default=utcnow_iso, onupdate=utcnow_iso)
    last_signed_in: Mapped[str] = mapped_column(String(32), default=utcnow_iso)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
