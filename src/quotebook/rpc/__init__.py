"""RPC layer: request context, router and the application procedures."""

from .context import RequestContext, create_context
from .procedures import app_router
from .router import Access, Procedure, ProcedureKind, Router, serialize

__all__ = [
    "RequestContext",
    "create_context",
    "app_router",
    "Access",
    "Procedure",
    "ProcedureKind",
    "Router",
    "serialize",
]
