"""
Tests for domain exceptions and the DRF exception handler.
"""

import pytest
from rest_framework.exceptions import NotAuthenticated

from core.exception_handler import api_exception_handler
from core.exceptions import (
    BaseApplicationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


class TestExceptions:
    @pytest.mark.parametrize(
        "exc_class,status,code",
        [
            (ValidationError, 400, "VALIDATION_ERROR"),
            (NotFoundError, 404, "NOT_FOUND"),
            (PermissionDeniedError, 403, "PERMISSION_DENIED"),
        ],
    )
    def test_defaults(self, exc_class, status, code):
        exc = exc_class("Something failed")

        assert isinstance(exc, BaseApplicationError)
        assert exc.status_code == status
        assert exc.error_code == code

    def test_to_dict(self):
        exc = NotFoundError(
            "Receiver not found",
            error_code="RECEIVER_NOT_FOUND",
            details={"receiver_id": 5},
        )

        assert exc.to_dict() == {
            "error": "Receiver not found",
            "error_code": "RECEIVER_NOT_FOUND",
            "details": {"receiver_id": 5},
        }
        assert str(exc) == "[RECEIVER_NOT_FOUND] Receiver not found"

    def test_to_dict_without_details(self):
        assert "details" not in ValidationError("bad").to_dict()


class TestApiExceptionHandler:
    def test_domain_error(self):
        response = api_exception_handler(
            PermissionDeniedError("Only admins", error_code="ADMIN_REQUIRED"), {}
        )

        assert response.status_code == 403
        assert response.data["error_code"] == "ADMIN_REQUIRED"

    def test_drf_error_uses_default_handler(self):
        response = api_exception_handler(NotAuthenticated(), {})

        assert response.status_code == 401

    def test_unexpected_error_is_500(self):
        response = api_exception_handler(RuntimeError("boom"), {})

        assert response.status_code == 500
        assert response.data == {
            "error": "A server error occurred.",
            "error_code": "INTERNAL_ERROR",
        }
