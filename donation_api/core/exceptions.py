"""
Domain error taxonomy.

Raised by the service and repository layers at the point of detection.
Only the HTTP layer (see ``donation_api.main``) turns these into responses;
``status_code`` is the class of response each kind maps to.
"""

from fastapi import status


class DomainError(Exception):
    """Base class for every error the core surfaces to callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DomainError):
    """Missing or malformed input. Bad request unless the caller says otherwise."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(DomainError):
    """Caller identity could not be resolved."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(DomainError):
    """Resolved identity may not perform the requested mutation."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DomainError):
    """Operation is not allowed in the product's current lifecycle state."""

    status_code = status.HTTP_409_CONFLICT


class StorageError(DomainError):
    """Persistence layer failed. Never swallowed; callers may retry."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
