"""Pydantic schemas for quote collections."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..db.schemas import ApiModel

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class CollectionCreate(ApiModel):
    """Schema for creating a collection."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)


class CollectionUpdate(ApiModel):
    """Schema for updating a collection."""

    id: str
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    color: Optional[str] = Field(None, pattern=COLOR_PATTERN)


class CollectionResponse(ApiModel):
    """Schema for collection responses."""

    id: str
    user_id: str
    name: str
    description: Optional[str]
    color: Optional[str]
    created_at: datetime
    updated_at: datetime

