"""Database module for quotebook."""

from .models import Base, User, generate_uuid, utcnow_iso
from .schemas import ApiModel, SuccessResponse, UserResponse, UserRole
from .sqlite import Database

__all__ = [
    "Base",
    "User",
    "generate_uuid",
    "utcnow_iso",
    "ApiModel",
    "SuccessResponse",
    "UserResponse",
    "UserRole",
    "Database",
]
