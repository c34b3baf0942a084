"""Tests for CollectionManager."""

import pytest

from quotebook.collections.schemas import CollectionCreate, CollectionUpdate
from quotebook.errors import NotFoundError
from quotebook.quotes.schemas import QuoteCreate


class TestCreate:
    """Tests for collection creation."""

    def test_create_collection(self, services, alice):
        collection = services.collections.create_collection(
            alice.id, CollectionCreate(name="Stoicism", color="#3b82f6")
        )

        assert collection.id
        assert collection.user_id == alice.id
        assert collection.name == "Stoicism"
        assert collection.color == "#3b82f6"
        assert collection.description is None

    def test_invalid_color_rejected(self):
        with pytest.raises(ValueError):
            CollectionCreate(name="Bad", color="blue")

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            CollectionCreate(name="")


class TestRead:
    """Tests for collection lookups."""

    def test_list_only_own(self, services, alice, alice_collection, bob_collection):
        collections = services.collections.list_collections(alice.id)
        assert [c.id for c in collections] == [alice_collection.id]

    def test_list_oldest_first(self, services, alice):
        names = ["First", "Second", "Third"]
        for name in names:
            services.collections.create_collection(alice.id, CollectionCreate(name=name))

        assert [c.name for c in services.collections.list_collections(alice.id)] == names

    def test_get_own(self, services, alice, alice_collection):
        assert services.collections.get_collection(alice.id, alice_collection.id).name == "Stoicism"

    def test_get_foreign_is_not_found(self, services, bob, alice_collection):
        with pytest.raises(NotFoundError):
            services.collections.get_collection(bob.id, alice_collection.id)

    def test_get_missing_is_not_found(self, services, alice):
        with pytest.raises(NotFoundError):
            services.collections.get_collection(alice.id, "missing")


class TestUpdate:
    """Tests for collection updates."""

    def test_partial_update(self, services, alice, alice_collection):
        updated = services.collections.update_collection(
            alice.id, CollectionUpdate(id=alice_collection.id, description="Old wisdom")
        )

        assert updated.description == "Old wisdom"
        assert updated.name == "Stoicism"
        assert updated.color == "#3b82f6"

    def test_clear_color(self, services, alice, alice_collection):
        updated = services.collections.update_collection(
            alice.id, CollectionUpdate(id=alice_collection.id, color=None)
        )
        assert updated.color is None

    def test_update_foreign_is_not_found(self, services, bob, alice_collection):
        with pytest.raises(NotFoundError):
            services.collections.update_collection(
                bob.id, CollectionUpdate(id=alice_collection.id, name="Mine now")
            )
        assert services.collections.find_collection(alice_collection.id).name == "Stoicism"


class TestDelete:
    """Tests for collection deletion."""

    def test_delete_cascades_to_quotes(self, services, alice, alice_collection, alice_quote):
        removed = services.collections.delete_collection(alice.id, alice_collection.id)

        assert removed == 1
        assert services.collections.find_collection(alice_collection.id) is None
        assert services.quotes.list_quotes(alice.id) == []

    def test_delete_leaves_other_collections(self, services, alice, alice_collection):
        other = services.collections.create_collection(alice.id, CollectionCreate(name="Other"))
        services.quotes.create_quote(alice.id, QuoteCreate(collection_id=other.id, text="Kept"))

        services.collections.delete_collection(alice.id, alice_collection.id)

        assert services.collections.count_quotes(alice.id, other.id) == 1

    def test_delete_foreign_is_not_found(self, services, bob, alice_collection, alice_quote):
        with pytest.raises(NotFoundError):
            services.collections.delete_collection(bob.id, alice_collection.id)
        assert services.collections.find_collection(alice_collection.id) is not None
