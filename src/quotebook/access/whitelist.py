"""Email allow-list manager."""

from typing import Optional

from sqlalchemy import select

from ..db.sqlite import Database
from ..log import get_logger
from .models import EmailWhitelistEntry
from .schemas import normalize_email

LOG = get_logger("whitelist")


class WhitelistManager:
    """Manages the email allow-list that gates all protected access."""

    def __init__(self, db: Database):
        self.db = db

    def is_allowed(self, email: Optional[str]) -> bool:
        """Check whether an email is on the allow-list (case-insensitive)."""
        if not email:
            return False
        with self.db.get_session() as session:
            stmt = select(EmailWhitelistEntry.id).where(
                EmailWhitelistEntry.email == normalize_email(email)
            )
            return session.execute(stmt).first() is not None

    def list_entries(self) -> list[EmailWhitelistEntry]:
        """List all allow-list entries ordered by email."""
        with self.db.get_session() as session:
            stmt = select(EmailWhitelistEntry).order_by(EmailWhitelistEntry.email)
            entries = session.execute(stmt).scalars().all()
            for entry in entries:
                session.expunge(entry)
            return list(entries)

    def add(self, email: str, added_by: Optional[str] = None) -> EmailWhitelistEntry:
        """Add an email to the allow-list.

        Adding an email that is already present returns the existing entry.

        Args:
            email: Email address
            added_by: ID of the admin adding it

        Returns:
            The allow-list entry
        """
        email = normalize_email(email)
        with self.db.get_session() as session:
            stmt = select(EmailWhitelistEntry).where(EmailWhitelistEntry.email == email)
            entry = session.execute(stmt).scalar_one_or_none()
            if entry is None:
                entry = EmailWhitelistEntry(email=email, added_by=added_by)
                session.add(entry)
                session.commit()
                session.refresh(entry)
                LOG.info("Added %s to allow-list", email)
            session.expunge(entry)
            return entry

    def remove(self, email: str) -> bool:
        """Remove an email from the allow-list.

        Returns:
            True if an entry was removed
        """
        email = normalize_email(email)
        with self.db.get_session() as session:
            stmt = select(EmailWhitelistEntry).where(EmailWhitelistEntry.email == email)
            entry = session.execute(stmt).scalar_one_or_none()
            if entry is None:
                return False
            session.delete(entry)
            session.commit()
            LOG.info("Removed %s from allow-list", email)
            return True
