"""Custom exception classes for the classroom backend.

Every failure surfaced to a caller is a ``ClassroomError`` with a stable
``kind`` and the HTTP status it maps to.
"""


class ClassroomError(Exception):
    """Base exception for all classroom errors."""

    kind = "Error"
    status_code = 500

    def __init__(self, message: str):
        """Initialize the exception.

        Args:
            message: Human-readable description of the failure.
        """
        self.message = message
        super().__init__(message)


class BadRequestError(ClassroomError):
    """Raised when an identifier or argument is malformed."""

    kind = "BadRequest"
    status_code = 400


class UnauthorizedError(ClassroomError):
    """Raised when a credential or token is missing, invalid or stale."""

    kind = "Unauthorized"
    status_code = 401


class ForbiddenError(ClassroomError):
    """Raised when an authenticated user lacks the required class role."""

    kind = "Forbidden"
    status_code = 403


class NotFoundError(ClassroomError):
    """Raised when a referenced entity does not exist."""

    kind = "NotFound"
    status_code = 404


class ConflictError(ClassroomError):
    """Raised on duplicate membership, duplicate identity or a broken rule."""

    kind = "Conflict"
    status_code = 409
