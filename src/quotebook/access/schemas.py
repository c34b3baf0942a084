"""Pydantic schemas for identity and the email allow-list."""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import field_validator

from ..db.schemas import ApiModel

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    """Case-fold an email address for storage and lookup."""
    return email.strip().lower()


@dataclass(frozen=True)
class VerifiedIdentity:
    """Identity returned by the identity provider for a valid credential."""

    identity_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    login_method: Optional[str] = None


class EmailInput(ApiModel):
    """Input carrying a single email address."""

    email: str

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = normalize_email(value)
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email address")
        return value


class EmailAccessResponse(ApiModel):
    """Result of an allow-list check."""

    allowed: bool


class WhitelistEntryResponse(ApiModel):
    """Schema for allow-list entries."""

    id: str
    email: str
    added_by: Optional[str]
    created_at: datetime
    updated_at: datetime
