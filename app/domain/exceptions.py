"""Domain exceptions for the taskscope application.

Defines domain-level exceptions that represent business rule violations and
the cache-layer failures the core absorbs. Presentation layer maps them to
HTTP responses in exception handlers.
"""

from typing import Any


class TaskScopeException(Exception):
    """Base exception for all taskscope application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body used by the HTTP exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(TaskScopeException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class UnauthenticatedAccessException(TaskScopeException):
    """Raised when an ownership-scoped operation runs with no principal bound.

    Fatal to the request; never retried.
    """

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, "UNAUTHENTICATED")


class ResourceNotFoundException(TaskScopeException):
    """Raised when a requested resource is not found.

    Also raised when the resource exists but belongs to another principal;
    callers cannot tell the two apart.
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'task').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class CacheUnavailableException(TaskScopeException):
    """Raised by a cache backend when it cannot be reached.

    Read paths catch it and fall back to the record store.
    """

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Cache unavailable during {operation}",
            "CACHE_UNAVAILABLE",
            {"operation": operation, "reason": reason},
        )


class CacheInvalidationException(TaskScopeException):
    """Failure to drop cache tags after a committed mutation.

    Logged, never raised to the caller: the mutation still reports success.
    """

    def __init__(self, tags: list[str], reason: str) -> None:
        super().__init__(
            f"Cache invalidation failed for tags {', '.join(tags)}",
            "CACHE_INVALIDATION_FAILURE",
            {"tags": tags, "reason": reason},
        )


class SqlNotConfiguredException(TaskScopeException):
    """Raised when an operation requires the database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
