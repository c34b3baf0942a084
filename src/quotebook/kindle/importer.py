"""Kindle highlight importer.

Inserts highlights as quotes in a target collection, skipping highlights that
were imported before, and records one sync log per run.

The duplicate check and the insert are separate transactions. Two imports of
overlapping highlights running at the same time for the same user can both
miss each other's rows and store the same highlight twice.
"""

from typing import Iterable, Optional

from sqlalchemy import select

from ..access.ownership import assert_owned
from ..collections.models import Collection
from ..db.sqlite import Database
from ..log import get_logger
from ..quotes.manager import QuoteManager
from ..quotes.models import Quote
from ..quotes.schemas import QuoteCreate
from .models import KindleSyncLog
from .schemas import KindleHighlight, SyncResult

LOG = get_logger("kindle")


class KindleImporter:
    """Imports Kindle highlights into a user's collection."""

    def __init__(self, db: Database, quotes: Optional[QuoteManager] = None):
        """Initialize importer.

        Args:
            db: Database instance
            quotes: Quote manager used for lookups and inserts
        """
        self.db = db
        self.quotes = quotes or QuoteManager(db)

    def sync(
        self,
        user_id: str,
        highlights: Iterable[KindleHighlight],
        collection_id: str,
    ) -> SyncResult:
        """Import highlights into a collection.

        Highlights are handled in order. Each one is first looked up by
        ``kindle_highlight_id`` against stored quotes, so a repeat later in
        the same batch counts as a duplicate of the earlier one. Failed
        inserts are tallied as skipped and do not stop the run.

        Args:
            user_id: Owner ID
            highlights: Highlights to import
            collection_id: Target collection

        Returns:
            SyncResult with counts and error messages

        Raises:
            NotFoundError: If the collection is missing or not the user's
        """
        with self.db.get_session() as session:
            assert_owned(session.get(Collection, collection_id), user_id, "Collection")

        result = SyncResult()

        for highlight in highlights:
            try:
                if self._find_existing(user_id, highlight) is not None:
                    result.duplicated += 1
                    continue

                self._create_quote(user_id, collection_id, highlight)
                result.added += 1
            except Exception as e:
                result.skipped += 1
                result.errors.append(f"Failed to add highlight: {e}")
                LOG.warning("Skipped highlight %s: %s", highlight.kindle_highlight_id, e)

        self._log_sync(user_id, result)
        LOG.info("Kindle sync for user %s: %s", user_id, result.summary)
        return result

    def _find_existing(self, user_id: str, highlight: KindleHighlight) -> Optional[Quote]:
        """Find a quote already imported from this highlight."""
        return self.quotes.find_by_highlight_id(user_id, highlight.kindle_highlight_id)

    def _create_quote(self, user_id: str, collection_id: str, highlight: KindleHighlight) -> Quote:
        """Insert a highlight as a new unread quote."""
        data = QuoteCreate(
            collection_id=collection_id,
            text=highlight.text,
            source=highlight.source,
            author=highlight.author,
            page_number=highlight.page_number,
        )
        return self.quotes.create_quote(
            user_id, data, kindle_highlight_id=highlight.kindle_highlight_id
        )

    def _log_sync(self, user_id: str, result: SyncResult) -> KindleSyncLog:
        """Persist the run summary."""
        with self.db.get_session() as session:
            log = KindleSyncLog(
                user_id=user_id,
                quotes_added=result.added,
                quotes_duplicated=result.duplicated,
                quotes_skipped=result.skipped,
                status=result.status.value,
                error_message="; ".join(result.errors) if result.errors else None,
            )
            session.add(log)
            session.commit()
            session.refresh(log)
            session.expunge(log)
            return log

    def get_last_sync(self, user_id: str) -> Optional[KindleSyncLog]:
        """Get the user's most recent sync log."""
        history = self.list_sync_history(user_id, limit=1)
        return history[0] if history else None

    def list_sync_history(self, user_id: str, limit: int = 10) -> list[KindleSyncLog]:
        """List the user's sync logs, newest first."""
        with self.db.get_session() as session:
            stmt = (
                select(KindleSyncLog)
                .where(KindleSyncLog.user_id == user_id)
                .order_by(KindleSyncLog.synced_at.desc(), KindleSyncLog.created_at.desc())
                .limit(limit)
            )
            logs = session.execute(stmt).scalars().all()
            for log in logs:
                session.expunge(log)
            return list(logs)
