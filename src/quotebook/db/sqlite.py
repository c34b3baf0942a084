"""SQLite database operations.

Handles database connection and session management. A ``Database`` is built
once at process start and passed to every manager that needs storage.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Union

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..log import get_logger
from .models import Base

LOG = get_logger("db")


class Database:
    """Database connection and session manager."""

    def __init__(self, db_path: Union[str, Path]):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file, or ":memory:"
        """
        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # For in-memory databases, use StaticPool to reuse the same connection
        # This ensures all sessions share the same in-memory database
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def is_memory(self) -> bool:
        return self._is_memory

    def create_tables(self) -> None:
        """Create all database tables."""
        # Import feature models to register them with Base
        from ..access.models import EmailWhitelistEntry  # noqa: F401
        from ..collections.models import Collection  # noqa: F401
        from ..quotes.models import Quote  # noqa: F401
        from ..kindle.models import KindleSyncLog  # noqa: F401

        Base.metadata.create_all(self.engine)
        LOG.debug("tables ensured at %s", self.db_path)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> bool:
        """Run a trivial round-trip query."""
        with self.get_session() as session:
            session.execute(text("SELECT 1"))
        return True
