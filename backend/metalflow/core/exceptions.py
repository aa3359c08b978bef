"""Application error taxonomy.

Services raise these; ``metalflow.api.errors`` turns them into problem
documents. Nothing below the transport layer picks HTTP status codes.
"""


class AppError(Exception):
    """Base class for errors that carry an HTTP mapping."""

    status_code: int = 500
    title: str = "An internal server error occurred."
    headers: dict[str, str] | None = None

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class NotFoundError(AppError):
    """A requested record does not exist or is inactive."""

    status_code = 404
    title = "Resource not found."


class ValidationError(AppError):
    """Invalid input or a reference to a missing/inactive record."""

    status_code = 400
    title = "Request validation failed."


class ConflictError(AppError):
    """Duplicate active name, or a write against an inactive record."""

    status_code = 409
    title = "Conflict while processing the request."


class PermissionDeniedError(AppError):
    """The target of the operation is protected."""

    status_code = 403
    title = "Permission denied."


class UnauthorizedError(AppError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    title = "Authentication required."
    headers = {"WWW-Authenticate": "Bearer"}


class PersistenceError(AppError):
    """A write failed in the database layer."""

    status_code = 500
