"""Quote manager for user-owned quotes."""

import random
from typing import Optional

from sqlalchemy import select

from ..access.ownership import assert_owned
from ..collections.models import Collection
from ..db.models import utcnow_iso
from ..db.sqlite import Database
from ..log import get_logger
from .models import Quote
from .schemas import QuoteCreate, QuoteUpdate
from .selector import pick_weighted

LOG = get_logger("quotes")


class QuoteManager:
    """Manages quote CRUD, reading state and daily selection."""

    def __init__(self, db: Database, rng: Optional[random.Random] = None):
        """Initialize quote manager.

        Args:
            db: Database instance
            rng: Random source for ``get_random``
        """
        self.db = db
        self.rng = rng or random.Random()

    # -------------------------------------------------------------------------
    # Quote CRUD
    # -------------------------------------------------------------------------

    def create_quote(
        self,
        user_id: str,
        data: QuoteCreate,
        kindle_highlight_id: Optional[str] = None,
    ) -> Quote:
        """Create a new quote in one of the user's collections.

        Args:
            user_id: Owner ID
            data: Quote creation data
            kindle_highlight_id: Dedup key for imported highlights

        Returns:
            Created quote

        Raises:
            NotFoundError: If the collection is missing or not the user's
        """
        with self.db.get_session() as session:
            assert_owned(session.get(Collection, data.collection_id), user_id, "Collection")

            quote = Quote(
                user_id=user_id,
                collection_id=data.collection_id,
                text=data.text,
                source=data.source,
                author=data.author,
                page_number=data.page_number,
                is_read=False,
                read_count=0,
                kindle_highlight_id=kindle_highlight_id,
            )

            session.add(quote)
            session.commit()
            session.refresh(quote)
            session.expunge(quote)

            return quote

    def get_quote(self, user_id: str, quote_id: str) -> Quote:
        """Get a quote owned by ``user_id``.

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        with self.db.get_session() as session:
            quote = assert_owned(session.get(Quote, quote_id), user_id, "Quote")
            session.expunge(quote)
            return quote

    def list_quotes(self, user_id: str, newest_first: bool = True) -> list[Quote]:
        """List all of the user's quotes.

        Args:
            user_id: Owner ID
            newest_first: Sort by creation time descending; ascending otherwise

        Returns:
            List of quotes
        """
        with self.db.get_session() as session:
            stmt = select(Quote).where(Quote.user_id == user_id)
            if newest_first:
                stmt = stmt.order_by(Quote.created_at.desc(), Quote.id.desc())
            else:
                stmt = stmt.order_by(Quote.created_at.asc(), Quote.id.asc())

            quotes = session.execute(stmt).scalars().all()
            for quote in quotes:
                session.expunge(quote)
            return list(quotes)

    def list_by_collection(self, user_id: str, collection_id: str) -> list[Quote]:
        """List the user's quotes in one collection, newest first."""
        with self.db.get_session() as session:
            stmt = (
                select(Quote)
                .where(Quote.user_id == user_id, Quote.collection_id == collection_id)
                .order_by(Quote.created_at.desc(), Quote.id.desc())
            )
            quotes = session.execute(stmt).scalars().all()
            for quote in quotes:
                session.expunge(quote)
            return list(quotes)

    def update_quote(self, user_id: str, data: QuoteUpdate) -> Quote:
        """Update a quote.

        Moving a quote to another collection re-checks that the new
        collection belongs to the user.

        Raises:
            NotFoundError: If the quote or the new collection is not the user's
        """
        with self.db.get_session() as session:
            quote = assert_owned(session.get(Quote, data.id), user_id, "Quote")

            if data.collection_id and data.collection_id != quote.collection_id:
                assert_owned(session.get(Collection, data.collection_id), user_id, "Collection")

            update_data = data.model_dump(exclude_unset=True, exclude={"id"})
            for field, value in update_data.items():
                if field in ("text", "collection_id") and value is None:
                    continue
                setattr(quote, field, value)

            quote.updated_at = utcnow_iso()
            session.commit()
            session.refresh(quote)
            session.expunge(quote)

            return quote

    def delete_quote(self, user_id: str, quote_id: str) -> None:
        """Hard-delete a quote.

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        with self.db.get_session() as session:
            quote = assert_owned(session.get(Quote, quote_id), user_id, "Quote")
            session.delete(quote)
            session.commit()

    # -------------------------------------------------------------------------
    # Reading state
    # -------------------------------------------------------------------------

    @staticmethod
    def apply_read(quote: Quote) -> None:
        """Record one read on a loaded quote.

        The new count is computed from the value loaded into this session, so
        two concurrent calls on the same row can lose one increment.
        """
        now = utcnow_iso()
        quote.is_read = True
        quote.last_read_at = now
        quote.read_count = (quote.read_count or 0) + 1
        quote.updated_at = now

    def mark_as_read(self, user_id: str, quote_id: str) -> Quote:
        """Mark a quote as read and bump its read count.

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        with self.db.get_session() as session:
            quote = assert_owned(session.get(Quote, quote_id), user_id, "Quote")
            self.apply_read(quote)
            session.commit()
            session.refresh(quote)
            session.expunge(quote)
            return quote

    def get_random(self, user_id: str) -> Optional[Quote]:
        """Pick the user's quote of the day.

        Quotes are walked in creation order; unread ones weigh 3, read ones 1.

        Returns:
            A quote, or None if the user has none
        """
        quotes = self.list_quotes(user_id, newest_first=False)
        return pick_weighted(quotes, self.rng)

    # -------------------------------------------------------------------------
    # Kindle dedup
    # -------------------------------------------------------------------------

    def find_by_highlight_id(self, user_id: str, kindle_highlight_id: str) -> Optional[Quote]:
        """Find the user's quote imported from a given Kindle highlight."""
        with self.db.get_session() as session:
            stmt = (
                select(Quote)
                .where(
                    Quote.user_id == user_id,
                    Quote.kindle_highlight_id == kindle_highlight_id,
                )
                .limit(1)
            )
            quote = session.execute(stmt).scalar_one_or_none()
            if quote:
                session.expunge(quote)
            return quote
