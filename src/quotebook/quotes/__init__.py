"""Quotes module: CRUD, reading state and the weighted daily quote."""

from .models import Quote
from .manager import QuoteManager
from .schemas import CollectionIdInput, IdInput, QuoteCreate, QuoteResponse, QuoteUpdate
from .selector import READ_WEIGHT, UNREAD_WEIGHT, pick_weighted, quote_weight

__all__ = [
    "Quote",
    "QuoteManager",
    "CollectionIdInput",
    "IdInput",
    "QuoteCreate",
    "QuoteResponse",
    "QuoteUpdate",
    "READ_WEIGHT",
    "UNREAD_WEIGHT",
    "pick_weighted",
    "quote_weight",
]
