"""Error taxonomy shared by managers, the RPC router and the HTTP layer."""

from typing import Optional


class QuotebookError(Exception):
    """Base error carrying an RPC error code."""

    code = "INTERNAL_SERVER_ERROR"
    default_message = "Internal error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthorizedError(QuotebookError):
    """No verified identity for a protected operation."""

    code = "UNAUTHORIZED"
    default_message = "Please sign in"


class ForbiddenError(QuotebookError):
    """Identity present but lacking role or allow-list permission."""

    code = "FORBIDDEN"
    default_message = "You do not have permission to perform this action"


class NotFoundError(QuotebookError):
    """Entity absent or not owned by the caller."""

    code = "NOT_FOUND"
    default_message = "Not found"


class ValidationError(QuotebookError):
    """Malformed input."""

    code = "VALIDATION"
    default_message = "Invalid input"
