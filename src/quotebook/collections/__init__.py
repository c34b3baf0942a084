"""Collections module for organizing quotes into named groups."""

from .manager import CollectionManager
from .models import Collection
from .schemas import CollectionCreate, CollectionResponse, CollectionUpdate

__all__ = [
    "CollectionManager",
    "Collection",
    "CollectionCreate",
    "CollectionResponse",
    "CollectionUpdate",
]
