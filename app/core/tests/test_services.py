"""
Tests for ServiceResult and BaseService in core/services.py.
"""

import logging

import pytest

from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from core.services import BaseService, ServiceResult


class TestServiceResult:
    def test_success(self):
        result = ServiceResult.success({"id": 1})

        assert result.success is True
        assert bool(result) is True
        assert result.data == {"id": 1}
        assert result.to_response() == {"success": True, "data": {"id": 1}}

    def test_failure_defaults_to_400(self):
        result = ServiceResult.failure("Bad", error_code="BAD")

        assert bool(result) is False
        assert result.http_status == 400
        assert result.to_response() == {"error": "Bad", "error_code": "BAD"}

    def test_failure_with_status_and_details(self):
        result = ServiceResult.failure(
            "Missing", error_code="GONE", errors={"id": 3}, status_code=404
        )

        assert result.http_status == 404
        assert result.to_response()["details"] == {"id": 3}

    @pytest.mark.parametrize(
        "exc,status,code",
        [
            (ValidationError("bad"), 400, "VALIDATION_ERROR"),
            (PermissionDeniedError("no", error_code="ADMIN_REQUIRED"), 403, "ADMIN_REQUIRED"),
            (NotFoundError("gone"), 404, "NOT_FOUND"),
        ],
    )
    def test_from_domain_exception(self, exc, status, code):
        result = ServiceResult.from_exception(exc)

        assert result.success is False
        assert result.http_status == status
        assert result.error_code == code

    def test_from_plain_exception(self):
        result = ServiceResult.from_exception(KeyError("x"))

        assert result.error_code == "KEYERROR"
        assert result.http_status == 400


class ExampleService(BaseService):
    pass


class TestBaseService:
    def test_logger_name(self):
        assert ExampleService.get_logger().name.endswith("ExampleService")

    def test_handle_exception_logs_and_converts(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = ExampleService.handle_exception(
                NotFoundError("Habit not found", error_code="HABIT_NOT_FOUND"), "reminder"
            )

        assert result.error_code == "HABIT_NOT_FOUND"
        assert result.http_status == 404
        assert "reminder" in caplog.text

    @pytest.mark.django_db
    def test_atomic_rolls_back(self):
        from habits.models import Habit
        from habits.tests.factories import HabitFactory

        with pytest.raises(RuntimeError):
            with ExampleService.atomic():
                HabitFactory()
                raise RuntimeError("boom")

        assert Habit.objects.count() == 0
