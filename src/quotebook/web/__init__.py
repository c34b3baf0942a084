"""HTTP surface for quotebook."""

from .app import create_app

__all__ = ["create_app"]
