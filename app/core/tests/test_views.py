"""
Tests for the health check endpoint.
"""

import pytest
from django.db.utils import OperationalError


@pytest.mark.django_db
class TestHealthCheck:
    def test_healthy(self, client):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "database": "connected",
            "channel_layer": "connected",
        }

    def test_channel_layer_failure_is_degraded_not_down(self, client, mocker):
        mocker.patch("core.views.get_channel_layer", return_value=None)

        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json()["channel_layer"] == "disconnected"

    def test_database_failure_is_503(self, client, mocker):
        cursor = mocker.patch("core.views.connection.cursor")
        cursor.side_effect = OperationalError("down")

        response = client.get("/health/")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
