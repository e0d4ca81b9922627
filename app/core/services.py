"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with common service utilities

Service Layer Philosophy:
    Services encapsulate business logic separate from views and models.
    Views handle HTTP concerns, models handle data, services handle logic.

Pattern Comparison:
    - ServiceResult: Returned for expected failures (validation, business rules)
    - Exceptions: Raised by lower layers (selectors, state managers) and
      converted to ServiceResult at the service boundary

Usage:
    from core.services import BaseService, ServiceResult

    class NotificationService(BaseService):
        @classmethod
        def send(cls, requester, **params) -> ServiceResult[SendOutcome]:
            try:
                selection = RecipientSelector.select(mode, requester, **params)
            except BaseApplicationError as exc:
                return ServiceResult.from_exception(exc)

            with cls.atomic():
                notification = Notification.objects.create_for_receivers(...)

            cls.get_logger().info(f"Created notification {notification.id}")
            return ServiceResult.success(outcome)

    # In view
    result = NotificationService.send(request.user, **data)
    if result.success:
        return Response(OutcomeSerializer(result.data).data, status=201)
    return Response(result.to_response(), status=result.http_status)

Related:
    - core.exceptions: Domain exceptions with error codes and HTTP status
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from collections.abc import Generator
    from typing import Any

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Provides consistent success/failure handling without exceptions.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling
        errors: Field-level errors or extra context for failures
        status_code: HTTP status suggested for a failure (defaults to 400)

    Usage:
        # Success case
        return ServiceResult.success(notification)

        # Failure case
        return ServiceResult.failure("Cannot send to yourself", "SELF_TARGET")
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    errors: dict[str, Any] | None = field(default=None)
    status_code: int | None = None

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        errors: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code for client handling
            errors: Field-level errors or extra context
            status_code: HTTP status for the API layer

        Returns:
            ServiceResult with success=False and error details

        Example:
            return ServiceResult.failure(
                "Notification not found",
                error_code="NOTIFICATION_NOT_FOUND",
                status_code=404,
            )
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            errors=errors,
            status_code=status_code,
        )

    @classmethod
    def from_exception(cls, exc: Exception, error_code: str | None = None) -> ServiceResult[T]:
        """
        Create a failed result from an exception.

        Domain exceptions keep their error code, details and HTTP status.
        Other exceptions are reported under their class name.

        Args:
            exc: The caught exception
            error_code: Optional error code override

        Returns:
            ServiceResult with error details from exception
        """
        if isinstance(exc, BaseApplicationError):
            return cls(
                success=False,
                error=exc.message,
                error_code=error_code or exc.error_code,
                errors=exc.details or None,
                status_code=exc.status_code,
            )
        return cls(
            success=False,
            error=str(exc),
            error_code=error_code or exc.__class__.__name__.upper(),
        )

    @property
    def http_status(self) -> int:
        """HTTP status for a failed result (400 unless the failure says otherwise)."""
        return self.status_code or 400

    def to_response(self) -> dict[str, Any]:
        """
        Convert to API response format.

        Failures use the same body shape as core.exception_handler so
        clients see one error format.

        Returns:
            Dict with data (success) or error, error_code and details
        """
        if self.success:
            return {"success": True, "data": self.data}

        response: dict[str, Any] = {"error": self.error}
        if self.error_code:
            response["error_code"] = self.error_code
        if self.errors:
            response["details"] = self.errors
        return response

    def __bool__(self) -> bool:
        """
        Allow using result in boolean context.

        Example:
            result = NotificationService.mark_read(notification_id, user)
            if result:  # Same as: if result.success
                ...
        """
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management
    - Exception handling patterns

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Services should be stateless
        - Use ServiceResult for expected failures
        - Raise exceptions for unexpected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.

        Returns:
            Logger instance for this service
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager are
        wrapped in a transaction. If any operation fails, all
        changes are rolled back.

        Example:
            with cls.atomic():
                notification = Notification.objects.create(...)
                NotificationRecipient.objects.bulk_create(rows)
                # If the receiver rows fail, the record is rolled back too
        """
        with transaction.atomic():
            yield

    @classmethod
    def handle_exception(
        cls,
        exc: Exception,
        context: str = "",
        log_level: int = logging.WARNING,
    ) -> ServiceResult:
        """
        Convert exception to ServiceResult with logging.

        Args:
            exc: The caught exception
            context: Additional context for logging
            log_level: Logging level (default WARNING)

        Returns:
            ServiceResult with error details

        Example:
            try:
                selection = RecipientSelector.select(mode, requester, **params)
            except BaseApplicationError as e:
                return cls.handle_exception(e, "recipient selection")
        """
        logger = cls.get_logger()
        message = f"{context}: {exc}" if context else str(exc)
        logger.log(log_level, message)
        return ServiceResult.from_exception(exc)
