from typing import Any, Mapping, Optional


class AppError(Exception):
    """Base class for errors surfaced to API callers.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Application error"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(AppError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_message = "Invalid input"


class UnauthorizedError(AppError):
    """Raised when the caller has no valid identity session (missing, expired or signed out)."""

    http_status = 401
    default_message = "Unauthorized"


class PermissionDeniedError(AppError):
    """Raised when the caller's identity fails an access policy for a write.

    Denied reads never raise: the rows are filtered out instead.
    """

    http_status = 403
    default_message = "Permission denied"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
        code: Optional[str] = None,
        table: Optional[str] = None,
        command: Optional[str] = None,
    ):
        super().__init__(message, details, code)
        self.table = table
        self.command = command


class NotFoundError(AppError):
    """Raised when a requested resource was not found (or is not visible to the caller)."""

    http_status = 404
    default_message = "Not found"


class ConflictError(AppError):
    """Raised when a write violates an integrity constraint (uniqueness, foreign key, not-null)."""

    http_status = 409
    default_message = "Conflict"
