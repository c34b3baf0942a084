"""Access control: identity verification, users, allow-list and ownership."""

from .identity import FirebaseIdentityVerifier, IdentityVerifier
from .models import EmailWhitelistEntry
from .ownership import assert_owned
from .schemas import (
    EmailAccessResponse,
    EmailInput,
    VerifiedIdentity,
    WhitelistEntryResponse,
    normalize_email,
)
from .users import UserManager
from .whitelist import WhitelistManager

__all__ = [
    "FirebaseIdentityVerifier",
    "IdentityVerifier",
    "EmailWhitelistEntry",
    "assert_owned",
    "EmailAccessResponse",
    "EmailInput",
    "VerifiedIdentity",
    "WhitelistEntryResponse",
    "normalize_email",
    "UserManager",
    "WhitelistManager",
]
