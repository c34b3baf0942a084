"""Per-request context construction.

The allow-list gate runs here, once per request, before any procedure body.
"""

from dataclasses import dataclass
from typing import Optional

from ..access.schemas import normalize_email
from ..db.models import User
from ..errors import UnauthorizedError
from ..log import get_logger
from ..services import Services

LOG = get_logger("rpc.context")


@dataclass
class RequestContext:
    """State available to every procedure call."""

    services: Services
    user: Optional[User] = None

    # Set when the credential was valid but the email is not allow-listed
    denied_email: Optional[str] = None

    # Message for UNAUTHORIZED when the credential was valid but unusable
    auth_error: Optional[str] = None

    # Set by auth.logout; the transport clears the session cookie
    clear_session: bool = False


def create_context(
    services: Services,
    token: Optional[str] = None,
    session: Optional[str] = None,
) -> RequestContext:
    """Resolve the caller for a request.

    Args:
        services: Service container
        token: Bearer ID token, if any; takes precedence over ``session``
        session: Session cookie, if any

    Returns:
        Context with ``user`` set only for verified, allow-listed callers
    """
    if not token and not session:
        return RequestContext(services=services)

    try:
        if token:
            identity = services.verifier.verify(token)
        else:
            identity = services.verifier.verify_session(session)
    except UnauthorizedError as e:
        LOG.warning("Rejected credential: %s", e)
        return RequestContext(services=services)

    if not identity.email:
        LOG.info("Identity %s has no email", identity.identity_id)
        return RequestContext(services=services, auth_error="Email not provided by OAuth provider")

    email = normalize_email(identity.email)
    if not services.whitelist.is_allowed(email):
        LOG.info("Identity %s (%s) is not on the allow-list", identity.identity_id, email)
        return RequestContext(services=services, denied_email=email)

    user = services.users.upsert_user(identity)
    return RequestContext(services=services, user=user)
