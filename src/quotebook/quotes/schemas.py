"""Pydantic schemas for quotes."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..db.schemas import ApiModel


class IdInput(ApiModel):
    """Input addressing a single row by ID."""

    id: str = Field(..., min_length=1)


class CollectionIdInput(ApiModel):
    """Input addressing a collection by ID."""

    collection_id: str = Field(..., min_length=1)


class QuoteCreate(ApiModel):
    """Schema for creating a quote."""

    collection_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    source: Optional[str] = Field(None, max_length=255)
    author: Optional[str] = Field(None, max_length=255)
    page_number: Optional[int] = Field(None, ge=0)


class QuoteUpdate(ApiModel):
    """Schema for updating a quote."""

    id: str
    text: Optional[str] = Field(None, min_length=1)
    source: Optional[str] = Field(None, max_length=255)
    author: Optional[str] = Field(None, max_length=255)
    page_number: Optional[int] = Field(None, ge=0)
    collection_id: Optional[str] = Field(None, min_length=1)


class QuoteResponse(ApiModel):
    """Schema for quote responses."""

    id: str
    user_id: str
    collection_id: str
    text: str
    source: Optional[str]
    author: Optional[str]
    page_number: Optional[int]
    is_read: bool
    read_count: int
    last_read_at: Optional[datetime]
    kindle_highlight_id: Optional[str]
    created_at: datetime
    updated_at: datetime
