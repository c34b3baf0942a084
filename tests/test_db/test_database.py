"""Tests for the SQLite database wrapper."""

import pytest
from sqlalchemy import inspect

from quotebook.db.models import User
from quotebook.db.sqlite import Database


class TestDatabaseCreation:
    """Tests for database initialization."""

    def test_create_tables(self, db: Database):
        """All feature tables exist after create_tables."""
        tables = set(inspect(db.engine).get_table_names())
        assert {"users", "email_whitelist", "collections", "quotes", "kindle_sync_log"} <= tables

    def test_memory_database(self, db: Database):
        assert db.is_memory
        assert db.ping()

    def test_file_database_creates_directory(self, tmp_path):
        path = tmp_path / "nested" / "quotes.db"
        database = Database(path)
        database.create_tables()

        assert not database.is_memory
        assert path.parent.exists()
        assert database.ping()

    def test_create_tables_is_repeatable(self, db: Database):
        db.create_tables()
        assert db.ping()


class TestSessions:
    """Tests for session handling."""

    def test_session_commits(self, db: Database):
        with db.get_session() as session:
            session.add(User(identity_id="uid-1", email="a@example.com"))

        with db.get_session() as session:
            assert session.query(User).count() == 1

    def test_session_rolls_back_on_error(self, db: Database):
        with pytest.raises(RuntimeError):
            with db.get_session() as session:
                session.add(User(identity_id="uid-1", email="a@example.com"))
                session.flush()
                raise RuntimeError("boom")

        with db.get_session() as session:
            assert session.query(User).count() == 0

    def test_sessions_share_memory_database(self, db: Database):
        with db.get_session() as session:
            session.add(User(identity_id="uid-1"))

        with db.get_session() as session:
            user = session.query(User).one()
            assert user.role == "user"
            assert not user.is_admin
            assert user.created_at
