from typing import Optional, Sequence


class AppError(Exception):
    """Base class for errors that map onto an HTTP response.

    Attributes:
        message: human-readable message
        details: optional list of human-readable field messages
        code: machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "An unexpected error occurred"
    default_code = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Sequence[str]] = None,
        code: Optional[str] = None,
    ):
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details = list(details) if details else None
        self.code = code or self.default_code

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(AppError):
    """Raised when input data is malformed or a precondition is not met (400)."""

    http_status = 400
    default_message = "Validation error"
    default_code = "VALIDATION_ERROR"


class DuplicateUserError(ServiceValidationError):
    """Raised when registering an email that already belongs to a user."""

    default_message = "User already exists"
    default_code = "USER_ALREADY_EXISTS"


class UnauthorizedError(AppError):
    """Raised when the request carries no valid session (401)."""

    http_status = 401
    default_message = "Unauthorized"
    default_code = "UNAUTHORIZED"


class NotFoundError(AppError):
    """Raised when an owned resource cannot be found (404).

    A resource owned by another user is reported the same way as a missing one.
    """

    http_status = 404
    default_message = "Not found"
    default_code = "NOT_FOUND"
