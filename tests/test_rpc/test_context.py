"""Tests for request context construction and the allow-list gate."""

from datetime import timedelta

import pytest

from quotebook.errors import ForbiddenError, UnauthorizedError
from quotebook.rpc import Access, Router, create_context


class TestCreateContext:
    """Tests for resolving the caller."""

    def test_no_token_is_anonymous(self, services):
        ctx = create_context(services, None)
        assert ctx.user is None
        assert ctx.denied_email is None

    def test_invalid_token_is_anonymous(self, services):
        ctx = create_context(services, "forged")
        assert ctx.user is None
        assert ctx.denied_email is None

    def test_allowed_email_upserts_user(self, services):
        ctx = create_context(services, "token-alice")

        assert ctx.user.identity_id == "uid-alice"
        assert ctx.user.email == "alice@example.com"
        assert services.users.get_by_identity_id("uid-alice") is not None

    def test_same_identity_same_user(self, services):
        first = create_context(services, "token-alice")
        second = create_context(services, "token-alice")
        assert first.user.id == second.user.id

    def test_denied_email_is_not_stored(self, services):
        ctx = create_context(services, "token-mallory")

        assert ctx.user is None
        assert ctx.denied_email == "mallory@example.com"
        assert services.users.get_by_identity_id("uid-mallory") is None

    def test_removed_email_loses_access(self, services):
        assert create_context(services, "token-bob").user is not None

        services.whitelist.remove("bob@example.com")
        assert create_context(services, "token-bob").user is None

    def test_owner_is_admin(self, admin_ctx):
        assert admin_ctx.user.is_admin

    def test_identity_without_email(self, services):
        ctx = create_context(services, "token-anon")

        assert ctx.user is None
        assert ctx.denied_email is None
        assert ctx.auth_error == "Email not provided by OAuth provider"
        assert services.users.get_by_identity_id("uid-anon") is None

    def test_session_cookie(self, services):
        cookie = services.verifier.create_session("token-alice", timedelta(hours=1))

        ctx = create_context(services, session=cookie)
        assert ctx.user.identity_id == "uid-alice"

    def test_id_token_as_session_is_anonymous(self, services):
        ctx = create_context(services, session="token-alice")
        assert ctx.user is None

    def test_session_cookie_as_token_is_anonymous(self, services):
        cookie = services.verifier.create_session("token-alice", timedelta(hours=1))

        ctx = create_context(services, cookie)
        assert ctx.user is None


class TestAuthorize:
    """Tests for access-level enforcement."""

    def test_public_always_passes(self, services):
        Router.authorize(create_context(services), Access.PUBLIC)
        Router.authorize(create_context(services, "token-mallory"), Access.PUBLIC)

    def test_protected_requires_user(self, services):
        with pytest.raises(UnauthorizedError):
            Router.authorize(create_context(services), Access.PROTECTED)

    def test_protected_denied_email(self, services):
        with pytest.raises(ForbiddenError, match="mallory@example.com is not authorized"):
            Router.authorize(create_context(services, "token-mallory"), Access.PROTECTED)

    def test_protected_identity_without_email(self, services):
        ctx = create_context(services, "token-anon")
        with pytest.raises(UnauthorizedError, match="Email not provided by OAuth provider"):
            Router.authorize(ctx, Access.PROTECTED)

    def test_admin_requires_role(self, alice_ctx, admin_ctx):
        with pytest.raises(ForbiddenError):
            Router.authorize(alice_ctx, Access.ADMIN)
        Router.authorize(admin_ctx, Access.ADMIN)
