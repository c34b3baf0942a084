"""Collection manager for user-owned quote collections."""

from typing import Optional

from sqlalchemy import delete, func, select

from ..access.ownership import assert_owned
from ..db.models import utcnow_iso
from ..db.sqlite import Database
from ..log import get_logger
from ..quotes.models import Quote
from .models import Collection
from .schemas import CollectionCreate, CollectionUpdate

LOG = get_logger("collections")


class CollectionManager:
    """Manages collection CRUD, scoped to the owning user."""

    def __init__(self, db: Database):
        """Initialize collection manager.

        Args:
            db: Database instance
        """
        self.db = db

    def create_collection(self, user_id: str, data: CollectionCreate) -> Collection:
        """Create a new collection owned by ``user_id``.

        Args:
            user_id: Owner ID
            data: Collection creation data

        Returns:
            Created collection
        """
        with self.db.get_session() as session:
            collection = Collection(
                user_id=user_id,
                name=data.name,
                description=data.description,
                color=data.color,
            )
            session.add(collection)
            session.commit()
            session.refresh(collection)
            session.expunge(collection)
            return collection

    def get_collection(self, user_id: str, collection_id: str) -> Collection:
        """Get a collection owned by ``user_id``.

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        with self.db.get_session() as session:
            collection = assert_owned(
                session.get(Collection, collection_id), user_id, "Collection"
            )
            session.expunge(collection)
            return collection

    def find_collection(self, collection_id: str) -> Optional[Collection]:
        """Get a collection by ID regardless of owner."""
        with self.db.get_session() as session:
            collection = session.get(Collection, collection_id)
            if collection:
                session.expunge(collection)
            return collection

    def list_collections(self, user_id: str) -> list[Collection]:
        """List the user's collections, oldest first."""
        with self.db.get_session() as session:
            stmt = (
                select(Collection)
                .where(Collection.user_id == user_id)
                .order_by(Collection.created_at, Collection.id)
            )
            collections = session.execute(stmt).scalars().all()
            for collection in collections:
                session.expunge(collection)
            return list(collections)

    def update_collection(self, user_id: str, data: CollectionUpdate) -> Collection:
        """Update a collection.

        Only fields present in ``data`` are changed.

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        with self.db.get_session() as session:
            collection = assert_owned(session.get(Collection, data.id), user_id, "Collection")

            update_data = data.model_dump(exclude_unset=True, exclude={"id"})
            for field, value in update_data.items():
                if field == "name" and value is None:
                    continue
                setattr(collection, field, value)

            collection.updated_at = utcnow_iso()
            session.commit()
            session.refresh(collection)
            session.expunge(collection)
            return collection

    def delete_collection(self, user_id: str, collection_id: str) -> int:
        """Delete a collection and the quotes filed in it.

        Returns:
            Number of quotes deleted along with the collection

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        with self.db.get_session() as session:
            collection = assert_owned(
                session.get(Collection, collection_id), user_id, "Collection"
            )
            result = session.execute(
                delete(Quote).where(
                    Quote.user_id == user_id,
                    Quote.collection_id == collection.id,
                )
            )
            session.delete(collection)
            session.commit()

            removed = result.rowcount or 0
            LOG.info("Deleted collection %s with %d quotes", collection_id, removed)
            return removed

    def count_quotes(self, user_id: str, collection_id: str) -> int:
        """Count the user's quotes in a collection."""
        with self.db.get_session() as session:
            stmt = select(func.count(Quote.id)).where(
                Quote.user_id == user_id,
                Quote.collection_id == collection_id,
            )
            return session.execute(stmt).scalar_one()
