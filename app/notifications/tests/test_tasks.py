"""
Tests for notification Celery tasks.

Tasks are called directly (synchronously) with the email transport
patched to the recording fake.
"""

import pytest

from notifications.delivery import EMAIL_SENT
from notifications.models import Notification
from notifications.tasks import deliver_notification_emails
from notifications.tests.conftest import RecordingEmailTransport
from notifications.tests.factories import NotificationFactory


@pytest.fixture
def email_transport(mocker):
    transport = RecordingEmailTransport()
    mocker.patch("notifications.delivery.DjangoEmailTransport", return_value=transport)
    return transport


@pytest.mark.django_db
class TestDeliverNotificationEmails:
    def test_sends_to_each_user(self, user, other_user, email_transport):
        notification = NotificationFactory(receivers=[user, other_user])

        results = deliver_notification_emails(
            notification.id, [user.id, other_user.id], "Subject", "<p>Hi</p>"
        )

        assert [r["user_id"] for r in results] == [user.id, other_user.id]
        assert all(r["status"] == EMAIL_SENT for r in results)
        assert email_transport.recipients() == [user.email, other_user.email]

    def test_skips_users_who_opted_out_since_send(self, user, other_user, email_transport):
        notification = NotificationFactory(receivers=[user, other_user])
        other_user.preferences = {**other_user.preferences, "email_reminders": False}
        other_user.save(update_fields=["preferences"])

        results = deliver_notification_emails(
            notification.id, [user.id, other_user.id], "Subject", "<p>Hi</p>"
        )

        assert [r["user_id"] for r in results] == [user.id]

    def test_skips_deleted_users(self, user, deleted_user, email_transport):
        notification = NotificationFactory(receivers=[user, deleted_user])

        deliver_notification_emails(
            notification.id, [user.id, deleted_user.id], "Subject", "<p>Hi</p>"
        )

        assert email_transport.recipients() == [user.email]

    def test_missing_notification_raises(self, user, email_transport):
        with pytest.raises(Notification.DoesNotExist):
            deliver_notification_emails(999999, [user.id], "Subject", "<p>Hi</p>")

        assert email_transport.sent == []
