"""Ownership checks for user-scoped rows."""

from typing import Optional, Protocol, TypeVar

from ..errors import NotFoundError


class Owned(Protocol):
    user_id: str


T = TypeVar("T", bound=Owned)


def assert_owned(entity: Optional[T], caller_id: str, label: str = "Resource") -> T:
    """Return ``entity`` if it exists and belongs to ``caller_id``.

    Missing and foreign rows raise the same ``NotFoundError`` so non-owners
    cannot tell the two apart.
    """
    if entity is None or entity.user_id != caller_id:
        raise NotFoundError(f"{label} not found")
    return entity
