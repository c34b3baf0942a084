"""Tests for the Firebase identity verifier."""

from datetime import timedelta

import pytest

from quotebook.access import identity as identity_module
from quotebook.access.identity import FirebaseIdentityVerifier
from quotebook.errors import UnauthorizedError


@pytest.fixture
def verifier():
    return FirebaseIdentityVerifier(app=object())


def test_verify_decodes_token(verifier, monkeypatch):
    def fake_verify(token, app=None):
        assert token == "good-token"
        return {
            "uid": "uid-1",
            "email": "reader@example.com",
            "name": "Reader",
            "firebase": {"sign_in_provider": "google.com"},
        }

    monkeypatch.setattr(identity_module.firebase_auth, "verify_id_token", fake_verify)

    result = verifier.verify("good-token")
    assert result.identity_id == "uid-1"
    assert result.email == "reader@example.com"
    assert result.name == "Reader"
    assert result.login_method == "google.com"


def test_verify_without_optional_claims(verifier, monkeypatch):
    monkeypatch.setattr(
        identity_module.firebase_auth, "verify_id_token", lambda token, app=None: {"uid": "uid-2"}
    )

    result = verifier.verify("token")
    assert result.identity_id == "uid-2"
    assert result.email is None
    assert result.login_method is None


def test_invalid_token(verifier, monkeypatch):
    def fake_verify(token, app=None):
        raise ValueError("Token expired")

    monkeypatch.setattr(identity_module.firebase_auth, "verify_id_token", fake_verify)

    with pytest.raises(UnauthorizedError, match="Token expired"):
        verifier.verify("bad-token")


def test_empty_token(verifier):
    with pytest.raises(UnauthorizedError):
        verifier.verify("")


def test_create_session_cookie(verifier, monkeypatch):
    calls = []

    def fake_create(token, expires_in, app=None):
        calls.append((token, expires_in))
        return "session-cookie"

    monkeypatch.setattr(identity_module.firebase_auth, "create_session_cookie", fake_create)

    cookie = verifier.create_session("good-token", timedelta(days=14))
    assert cookie == "session-cookie"
    assert calls == [("good-token", timedelta(days=14))]


def test_create_session_with_rejected_token(verifier, monkeypatch):
    def fake_create(token, expires_in, app=None):
        raise ValueError("Token too old")

    monkeypatch.setattr(identity_module.firebase_auth, "create_session_cookie", fake_create)

    with pytest.raises(UnauthorizedError, match="Token too old"):
        verifier.create_session("stale-token", timedelta(hours=1))


def test_verify_session_cookie(verifier, monkeypatch):
    def fake_verify_session(cookie, app=None):
        assert cookie == "session-cookie"
        return {"uid": "uid-1", "email": "reader@example.com"}

    def fail_verify_id_token(token, app=None):
        raise AssertionError("session cookies are not ID tokens")

    monkeypatch.setattr(identity_module.firebase_auth, "verify_session_cookie", fake_verify_session)
    monkeypatch.setattr(identity_module.firebase_auth, "verify_id_token", fail_verify_id_token)

    result = verifier.verify_session("session-cookie")
    assert result.identity_id == "uid-1"
    assert result.email == "reader@example.com"


def test_invalid_session_cookie(verifier, monkeypatch):
    def fake_verify_session(cookie, app=None):
        raise ValueError("Session cookie expired")

    monkeypatch.setattr(identity_module.firebase_auth, "verify_session_cookie", fake_verify_session)

    with pytest.raises(UnauthorizedError, match="Invalid session"):
        verifier.verify_session("old-cookie")


def test_empty_session_cookie(verifier):
    with pytest.raises(UnauthorizedError, match="Missing session"):
        verifier.verify_session("")
