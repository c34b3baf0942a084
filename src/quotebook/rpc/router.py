"""Typed procedure router.

Procedures are registered by dotted name (``quotes.getRandom``) with an
access level and an optional pydantic input model. ``Router.call`` checks
access, validates the input, runs the handler and returns JSON-ready data.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import pydantic
from pydantic import BaseModel

from ..errors import ForbiddenError, NotFoundError, UnauthorizedError, ValidationError
from ..log import get_logger
from .context import RequestContext

LOG = get_logger("rpc")


class Access(str, Enum):
    """Who may call a procedure."""

    PUBLIC = "public"
    PROTECTED = "protected"
    ADMIN = "admin"


class ProcedureKind(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"


@dataclass
class Procedure:
    """A registered procedure."""

    name: str
    handler: Callable[..., Any]
    access: Access
    kind: ProcedureKind
    input_model: Optional[type[BaseModel]] = None


def serialize(value: Any) -> Any:
    """Convert a handler result into JSON-compatible data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    if isinstance(value, dict):
        return {key: serialize(item) for key, item in value.items()}
    return value


def _format_validation_error(error: pydantic.ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        parts.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(parts)


class Router:
    """Registry and dispatcher for procedures."""

    def __init__(self):
        self._procedures: dict[str, Procedure] = {}

    def _register(
        self,
        name: str,
        kind: ProcedureKind,
        access: Access,
        input: Optional[type[BaseModel]],
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            if name in self._procedures:
                raise ValueError(f"Procedure already registered: {name}")
            self._procedures[name] = Procedure(
                name=name, handler=handler, access=access, kind=kind, input_model=input
            )
            return handler

        return decorator

    def query(self, name: str, access: Access = Access.PROTECTED, input: Optional[type[BaseModel]] = None):
        """Register a read-only procedure."""
        return self._register(name, ProcedureKind.QUERY, access, input)

    def mutation(self, name: str, access: Access = Access.PROTECTED, input: Optional[type[BaseModel]] = None):
        """Register a state-changing procedure."""
        return self._register(name, ProcedureKind.MUTATION, access, input)

    def get(self, name: str) -> Procedure:
        """Look up a procedure by name.

        Raises:
            NotFoundError: If no procedure has that name
        """
        procedure = self._procedures.get(name)
        if procedure is None:
            raise NotFoundError(f"No procedure named '{name}'")
        return procedure

    @property
    def names(self) -> list[str]:
        return sorted(self._procedures)

    @staticmethod
    def authorize(ctx: RequestContext, access: Access) -> None:
        """Enforce the access level for the current caller."""
        if access == Access.PUBLIC:
            return
        if ctx.user is None:
            if ctx.denied_email is not None:
                raise ForbiddenError(
                    f"Email {ctx.denied_email} is not authorized to access this application. "
                    "Please contact the administrator."
                )
            raise UnauthorizedError(ctx.auth_error)
        if access == Access.ADMIN and not ctx.user.is_admin:
            raise ForbiddenError()

    def call(self, ctx: RequestContext, name: str, payload: Any = None) -> Any:
        """Run a procedure.

        Args:
            ctx: Request context
            name: Dotted procedure name
            payload: Raw input (dict) for procedures that take one

        Returns:
            JSON-compatible result

        Raises:
            QuotebookError: On unknown procedure, access or validation failures
                and errors raised by the handler
        """
        procedure = self.get(name)
        self.authorize(ctx, procedure.access)

        if procedure.input_model is None:
            result = procedure.handler(ctx)
        else:
            try:
                data = procedure.input_model.model_validate(payload if payload is not None else {})
            except pydantic.ValidationError as e:
                raise ValidationError(_format_validation_error(e)) from e
            result = procedure.handler(ctx, data)

        LOG.debug("%s %s ok", procedure.kind.value, name)
        return serialize(result)
