"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the application
- Machine-readable error codes for client handling
- A fixed HTTP status per error family

Exception Hierarchy:
    BaseApplicationError (base, 400)
    ├── ValidationError - Input validation failures (400)
    ├── NotFoundError - Resource not found (404)
    └── PermissionDeniedError - Authorization failures (403)

Usage:
    from core.exceptions import ValidationError, NotFoundError

    # Raise with message only
    raise ValidationError("Title is required")

    # Raise with error code for client handling
    raise ValidationError("Cannot send to yourself", error_code="SELF_TARGET")

    # Raise with additional details
    raise NotFoundError(
        "Receiver not found",
        error_code="RECEIVER_NOT_FOUND",
        details={"receiver_id": 42},
    )

Note:
    These exceptions are for domain/business logic errors. Services convert
    them into ServiceResult failures; anything that escapes to DRF is
    rendered by core.exception_handler.api_exception_handler.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, metadata, etc.)
        status_code: HTTP status used when the error reaches the API layer
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and (when present) details keys

        Example:
            {
                "error": "Receiver not found",
                "error_code": "RECEIVER_NOT_FOUND",
                "details": {"receiver_id": 42}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Missing required fields (no receiver, empty title)
    - Business rule violations (sending to yourself, empty system audience)
    - Notification types disabled by system settings

    Note:
        For DRF serializer validation, use DRF's built-in validation.
        Use this for service-layer validation logic.
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Use for:
    - Receiver lookups that miss or hit a soft-deleted user
    - Notifications the caller is not a receiver of, or has hidden
    - Habits that do not exist or belong to someone else
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when user lacks permission for an operation.

    Use for:
    - Role-based targeting rules (only admins broadcast)
    - Requests made on behalf of a soft-deleted account

    Note:
        For authentication failures (missing/invalid token), DRF's
        NotAuthenticated / AuthenticationFailed apply instead.
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403

