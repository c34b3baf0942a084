"""Pydantic schemas shared across modules.

Wire payloads use camelCase names; ``ApiModel`` accepts both camelCase and
snake_case on input and emits camelCase when dumped ``by_alias``.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UserRole(str, Enum):
    """Account roles."""

    USER = "user"
    ADMIN = "admin"


class ApiModel(BaseModel):
    """Base for every schema that crosses the RPC boundary."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class SuccessResponse(ApiModel):
    """Acknowledgement for mutations without a payload."""

    success: bool = True


class UserResponse(ApiModel):
    """Schema for user responses."""

    id: str
    identity_id: str
    name: Optional[str]
    email: Optional[str]
    login_method: Optional[str]
    role: UserRole
    created_at: datetime
    updated_at: datetime
    last_signed_in: datetime
