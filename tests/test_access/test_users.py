"""Tests for UserManager."""

import pytest

from quotebook.access.schemas import VerifiedIdentity
from quotebook.access.users import UserManager
from quotebook.db.schemas import UserRole
from quotebook.errors import NotFoundError


@pytest.fixture
def manager(db):
    return UserManager(db, owner_identity_id="uid-owner")


def identity(uid="uid-1", email="Reader@Example.com", name="Reader"):
    return VerifiedIdentity(identity_id=uid, email=email, name=name, login_method="password")


class TestUpsert:
    """Tests for sign-in upserts."""

    def test_creates_user(self, manager):
        user = manager.upsert_user(identity())

        assert user.id
        assert user.identity_id == "uid-1"
        assert user.email == "reader@example.com"
        assert user.name == "Reader"
        assert user.login_method == "password"
        assert user.role == UserRole.USER.value

    def test_updates_existing(self, manager):
        first = manager.upsert_user(identity())
        second = manager.upsert_user(identity(name="Renamed", email="new@example.com"))

        assert first.id == second.id
        assert second.name == "Renamed"
        assert second.email == "new@example.com"
        assert len(manager.list_users()) == 1

    def test_owner_becomes_admin(self, manager):
        user = manager.upsert_user(identity(uid="uid-owner"))
        assert user.is_admin

    def test_keeps_existing_role(self, manager):
        user = manager.upsert_user(identity())
        manager.set_role(user.id, UserRole.ADMIN)

        again = manager.upsert_user(identity())
        assert again.role == UserRole.ADMIN.value

    def test_explicit_role(self, manager):
        user = manager.upsert_user(identity(), role=UserRole.ADMIN)
        assert user.is_admin

    def test_concurrent_first_sign_in(self, manager, monkeypatch):
        existing = manager.upsert_user(identity())

        # The lookup misses the row another request just inserted
        original = manager._find_by_identity
        lookups = []

        def stale_then_fresh(session, identity_id):
            lookups.append(identity_id)
            if len(lookups) == 1:
                return None
            return original(session, identity_id)

        monkeypatch.setattr(manager, "_find_by_identity", stale_then_fresh)

        user = manager.upsert_user(identity(name="Second Tab"))

        assert user.id == existing.id
        assert user.name == "Second Tab"
        assert lookups == ["uid-1", "uid-1"]
        assert len(manager.list_users()) == 1


class TestLookups:
    """Tests for user lookups."""

    def test_get_by_identity_and_email(self, manager):
        user = manager.upsert_user(identity())

        assert manager.get_user(user.id).id == user.id
        assert manager.get_by_identity_id("uid-1").id == user.id
        assert manager.get_by_email("READER@example.com").id == user.id
        assert manager.get_by_email("nobody@example.com") is None

    def test_set_role_missing_user(self, manager):
        with pytest.raises(NotFoundError):
            manager.set_role("missing", UserRole.ADMIN)
