"""Pytest configuration and shared fixtures.

Provides an in-memory database, a service container wired to a fake identity
verifier, and a few signed-in users.
"""

import random
from datetime import timedelta
from pathlib import Path
from typing import Optional

import pytest

from quotebook.access.schemas import VerifiedIdentity
from quotebook.collections.schemas import CollectionCreate
from quotebook.config import Config, reset_config
from quotebook.db.sqlite import Database
from quotebook.errors import UnauthorizedError
from quotebook.quotes.schemas import QuoteCreate
from quotebook.rpc import RequestContext, create_context
from quotebook.services import Services

OWNER_UID = "uid-owner"


class FakeVerifier:
    """Identity verifier that accepts tokens registered in ``identities``.

    Session cookies are kept apart from ID tokens: ``verify`` only accepts
    ID tokens and ``verify_session`` only accepts cookies it minted.
    """

    def __init__(self):
        self.identities: dict[str, VerifiedIdentity] = {}
        self.sessions: dict[str, VerifiedIdentity] = {}
        self.session_lifetimes: list[timedelta] = []

    def register(self, token: str, identity_id: str, email: Optional[str], name: str = None) -> None:
        self.identities[token] = VerifiedIdentity(
            identity_id=identity_id,
            email=email,
            name=name,
            login_method="google.com",
        )

    def verify(self, token: str) -> VerifiedIdentity:
        try:
            return self.identities[token]
        except KeyError:
            raise UnauthorizedError("Invalid credential") from None

    def create_session(self, token: str, expires_in: timedelta) -> str:
        identity = self.verify(token)
        cookie = f"session-{len(self.sessions) + 1}-{identity.identity_id}"
        self.sessions[cookie] = identity
        self.session_lifetimes.append(expires_in)
        return cookie

    def verify_session(self, cookie: str) -> VerifiedIdentity:
        try:
            return self.sessions[cookie]
        except KeyError:
            raise UnauthorizedError("Invalid session") from None


def make_config(db_path=":memory:") -> Config:
    return Config(
        db_path=Path(db_path),
        owner_identity_id=OWNER_UID,
        firebase_credentials=None,
        firebase_project_id=None,
        session_cookie_name="quotebook_session",
        session_max_age=3600,
        session_secure=False,
        host="127.0.0.1",
        port=5000,
        log_level="DEBUG",
    )


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_config():
    reset_config()
    yield
    reset_config()


@pytest.fixture
def db() -> Database:
    """Create an in-memory database for testing."""
    database = Database(":memory:")
    database.create_tables()
    return database


@pytest.fixture
def verifier() -> FakeVerifier:
    fake = FakeVerifier()
    fake.register("token-alice", "uid-alice", "Alice@Example.com", "Alice")
    fake.register("token-bob", "uid-bob", "bob@example.com", "Bob")
    fake.register("token-owner", OWNER_UID, "owner@example.com", "Owner")
    fake.register("token-mallory", "uid-mallory", "mallory@example.com", "Mallory")
    fake.register("token-anon", "uid-anon", None, "No Email")
    return fake


@pytest.fixture
def services(db: Database, verifier: FakeVerifier) -> Services:
    """Service container with alice, bob and the owner allow-listed."""
    svc = Services.create(make_config(), db=db, verifier=verifier)
    svc.quotes.rng = random.Random(1234)
    for email in ("alice@example.com", "bob@example.com", "owner@example.com"):
        svc.whitelist.add(email)
    return svc


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def alice_ctx(services: Services) -> RequestContext:
    return create_context(services, "token-alice")


@pytest.fixture
def bob_ctx(services: Services) -> RequestContext:
    return create_context(services, "token-bob")


@pytest.fixture
def admin_ctx(services: Services) -> RequestContext:
    return create_context(services, "token-owner")


@pytest.fixture
def alice(alice_ctx: RequestContext):
    return alice_ctx.user


@pytest.fixture
def bob(bob_ctx: RequestContext):
    return bob_ctx.user


@pytest.fixture
def alice_collection(services: Services, alice):
    return services.collections.create_collection(
        alice.id, CollectionCreate(name="Stoicism", color="#3b82f6")
    )


@pytest.fixture
def bob_collection(services: Services, bob):
    return services.collections.create_collection(bob.id, CollectionCreate(name="Bob's"))


@pytest.fixture
def alice_quote(services: Services, alice, alice_collection):
    return services.quotes.create_quote(
        alice.id,
        QuoteCreate(
            collection_id=alice_collection.id,
            text="Memento mori",
            author="Marcus Aurelius",
            source="Meditations",
            page_number=12,
        ),
    )


@pytest.fixture
def bob_quote(services: Services, bob, bob_collection):
    return services.quotes.create_quote(
        bob.id, QuoteCreate(collection_id=bob_collection.id, text="Bob's quote")
    )
