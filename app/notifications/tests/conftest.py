"""
Test configuration and fixtures for notification tests.

This module provides:
- User fixtures (regular, admin, muted, email opted out, soft-deleted)
- RecordingTransport / RecordingEmailTransport fakes for delivery
- ``dispatcher`` fixture patching NotificationService to use the fakes
- API client helpers for authenticated requests

Usage:
    def test_example(admin_user, user, dispatcher, admin_client):
        response = admin_client.post("/api/v1/notifications/send-to-all/", {...})
        assert dispatcher.transport.channel_ids() == [str(user.id)]
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import AdminFactory, UserFactory
from notifications.delivery import DeliveryDispatcher


# =============================================================================
# Transport fakes
# =============================================================================


class RecordingTransport:
    """RealtimeTransport that records emits and can fail for chosen channels."""

    def __init__(self, fail_for=()):
        self.events = []
        self.fail_for = {str(channel) for channel in fail_for}

    def emit(self, channel_id, event_name, payload):
        if str(channel_id) in self.fail_for:
            raise ConnectionError(f"channel {channel_id} unreachable")
        self.events.append((channel_id, event_name, payload))

    def channel_ids(self):
        return [channel_id for channel_id, _, _ in self.events]


class RecordingEmailTransport:
    """EmailTransport that records sends and can fail for chosen addresses."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def send(self, to, subject, html):
        if to in self.fail_for:
            raise ConnectionError(f"SMTP rejected {to}")
        self.sent.append((to, subject, html))

    def recipients(self):
        return [to for to, _, _ in self.sent]


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Regular user with every channel enabled."""
    return UserFactory()


@pytest.fixture
def other_user(db):
    """Second regular user for multi-receiver tests."""
    return UserFactory()


@pytest.fixture
def admin_user(db):
    """User with the admin role."""
    return AdminFactory()


@pytest.fixture
def other_admin(db):
    """Second admin for all-admins targeting."""
    return AdminFactory()


@pytest.fixture
def muted_user(db):
    """Regular user with the global notification gate off."""
    return UserFactory(notifications_enabled=False)


@pytest.fixture
def email_opted_out_user(db):
    """Regular user allowing in-app but not email."""
    return UserFactory(
        preferences={"theme": "light", "notifications": True, "email_reminders": False}
    )


@pytest.fixture
def deleted_user(db):
    """Soft-deleted regular user."""
    user = UserFactory()
    user.soft_delete()
    return user


# =============================================================================
# Delivery Fixtures
# =============================================================================


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def email_transport():
    return RecordingEmailTransport()


@pytest.fixture
def dispatcher(mocker, transport, email_transport):
    """Route NotificationService delivery through the recording fakes."""
    instance = DeliveryDispatcher(transport=transport, email_transport=email_transport)
    mocker.patch(
        "notifications.services.NotificationService.get_dispatcher",
        return_value=instance,
    )
    return instance


# =============================================================================
# API Client Fixtures
# =============================================================================


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client(user):
    """API client authenticated as the regular ``user``."""
    return _client_for(user)


@pytest.fixture
def admin_client(admin_user):
    """API client authenticated as ``admin_user``."""
    return _client_for(admin_user)


@pytest.fixture
def client_for():
    """Factory fixture: build an authenticated client for any user."""
    return _client_for
