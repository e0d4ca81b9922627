"""
Celery tasks for notification delivery.

Tasks:
    deliver_notification_emails: Send a notification's emails off the request path

Design:
    - Tasks receive ids, never model instances
    - Receivers are reloaded and their email preference re-checked, so a
      user who opted out (or was deleted) after the send is skipped
    - Per-recipient failures are recorded, never raised; the task itself
      only retries on unexpected errors before any email was attempted

Usage:
    from notifications.tasks import deliver_notification_emails

    # Queued by NotificationService when NOTIFICATIONS_EMAIL_ASYNC is on
    deliver_notification_emails.delay(notification.id, [1, 2], subject, html)
"""

from __future__ import annotations

import logging

from celery import shared_task

from authentication.models import User
from notifications import preferences
from notifications.delivery import DeliveryDispatcher
from notifications.models import Notification

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Notification.DoesNotExist,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def deliver_notification_emails(
    self,
    notification_id: int,
    user_ids: list[int],
    subject: str,
    html: str,
) -> list[dict]:
    """
    Email the given receivers of a notification.

    Flow:
        1. Make sure the notification is committed (retry otherwise)
        2. Reload active users by id
        3. Drop users whose email preference is now off
        4. Send via DeliveryDispatcher, collecting per-recipient results

    Args:
        notification_id: Persisted notification id
        user_ids: Email-eligible receiver ids at send time
        subject: Email subject
        html: HTML body

    Returns:
        List of EmailResult dicts
    """
    Notification.objects.only("id").get(pk=notification_id)

    users = User.objects.find_many(user_ids)
    recipients = [user for user in users if preferences.should_send_email(user)]
    skipped = len(user_ids) - len(recipients)
    if skipped:
        logger.info(
            f"Skipping {skipped} email recipients for notification {notification_id} "
            f"(deleted or opted out)"
        )

    results = DeliveryDispatcher().send_emails(recipients, subject, html)
    return [result.to_dict() for result in results]
