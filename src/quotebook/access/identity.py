"""Identity-provider adapter.

Exchanges a bearer credential (a Firebase ID token) or a session cookie minted
from one for a verified identity.
"""

from datetime import timedelta
from pathlib import Path
from typing import Any, Optional

import firebase_admin
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from firebase_admin import exceptions as firebase_exceptions

from ..errors import UnauthorizedError
from ..log import get_logger
from .schemas import VerifiedIdentity

LOG = get_logger("identity")


class IdentityVerifier:
    """Interface for credential verification."""

    def verify(self, token: str) -> VerifiedIdentity:
        """Verify a bearer ID token.

        Raises:
            UnauthorizedError: If the credential is missing or invalid
        """
        raise NotImplementedError

    def create_session(self, token: str, expires_in: timedelta) -> str:
        """Exchange a fresh ID token for a long-lived session cookie.

        Raises:
            UnauthorizedError: If the ID token is invalid
        """
        raise NotImplementedError

    def verify_session(self, cookie: str) -> VerifiedIdentity:
        """Verify a session cookie issued by ``create_session``.

        Raises:
            UnauthorizedError: If the cookie is missing, invalid or expired
        """
        raise NotImplementedError


def _identity_from_claims(decoded: dict) -> VerifiedIdentity:
    provider = (decoded.get("firebase") or {}).get("sign_in_provider")
    return VerifiedIdentity(
        identity_id=decoded["uid"],
        email=decoded.get("email"),
        name=decoded.get("name"),
        login_method=provider,
    )


class FirebaseIdentityVerifier(IdentityVerifier):
    """Verifies Firebase ID tokens and session cookies with firebase-admin."""

    def __init__(
        self,
        credentials_path: Optional[Path] = None,
        project_id: Optional[str] = None,
        app: Optional[Any] = None,
    ):
        """Initialize verifier.

        Args:
            credentials_path: Service account JSON; application default
                credentials are used when omitted
            project_id: Firebase project id override
            app: Already initialized firebase_admin App
        """
        self.credentials_path = credentials_path
        self.project_id = project_id
        self._app = app

    def _get_app(self) -> Any:
        """Initialize the Firebase app on first use."""
        if self._app is not None:
            return self._app

        if firebase_admin._apps:
            self._app = firebase_admin.get_app()
            return self._app

        cred = credentials.Certificate(str(self.credentials_path)) if self.credentials_path else None
        options = {"projectId": self.project_id} if self.project_id else None
        self._app = firebase_admin.initialize_app(cred, options)
        LOG.info("Firebase app initialized")
        return self._app

    def verify(self, token: str) -> VerifiedIdentity:
        if not token:
            raise UnauthorizedError("Missing credential")

        try:
            decoded = firebase_auth.verify_id_token(token, app=self._get_app())
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            raise UnauthorizedError(f"Invalid credential: {e}") from e

        return _identity_from_claims(decoded)

    def create_session(self, token: str, expires_in: timedelta) -> str:
        if not token:
            raise UnauthorizedError("Missing credential")

        try:
            return firebase_auth.create_session_cookie(
                token, expires_in=expires_in, app=self._get_app()
            )
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            raise UnauthorizedError(f"Could not start session: {e}") from e

    def verify_session(self, cookie: str) -> VerifiedIdentity:
        if not cookie:
            raise UnauthorizedError("Missing session")

        try:
            decoded = firebase_auth.verify_session_cookie(cookie, app=self._get_app())
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            raise UnauthorizedError(f"Invalid session: {e}") from e

        return _identity_from_claims(decoded)
