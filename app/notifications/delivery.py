"""
Delivery dispatch for persisted notifications.

Runs after the record is committed. Two independent legs:

    push         one realtime emit per in-app-eligible receiver
    send_emails  one email per email-eligible receiver

Both legs are best-effort: a failure for one receiver is logged and
collected, never raised, and never stops the remaining receivers. The send
itself has already succeeded once the record exists; a receiver that missed
a push sees the record on their next inbox fetch.

Transports:
    ChannelLayerTransport: Django Channels group_send to the receiver's group
    DjangoEmailTransport: django.core.mail with an HTML alternative

Usage:
    from notifications.delivery import DeliveryDispatcher

    dispatcher = DeliveryDispatcher()
    report = dispatcher.push(notification, selection.in_app_eligible)
    results = dispatcher.send_emails(selection.email_eligible, subject, html)
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.core.mail import send_mail
from django.utils.html import strip_tags

from notifications.models import RealtimeEvent
from notifications.serializers import notification_payload

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import Any

    from authentication.models import User
    from notifications.models import Notification
    from notifications.protocols import EmailTransport, RealtimeTransport

logger = logging.getLogger(__name__)


EMAIL_SENT = "sent"
EMAIL_FAILED = "failed"

# Channels handler invoked on NotificationConsumer for every emitted event
CONSUMER_HANDLER = "notification.event"


class DeliveryError(Exception):
    """
    A transport failed to deliver to one receiver.

    Attributes:
        code: Short machine-readable failure code
        is_permanent: Whether retrying cannot help (e.g. no address)
    """

    def __init__(self, message: str, code: str, is_permanent: bool = False):
        super().__init__(message)
        self.code = code
        self.is_permanent = is_permanent


def group_name_for(channel_id: int | str) -> str:
    """Channels group that holds every socket of one user."""
    return f"{settings.NOTIFICATIONS_GROUP_PREFIX}_{channel_id}"


# =============================================================================
# Transports
# =============================================================================


class ChannelLayerTransport:
    """
    Realtime transport backed by the Channels layer.

    Every socket a user opens joins ``group_name_for(user.id)`` (see
    notifications.consumers), so one group_send reaches all of them.
    """

    def __init__(self, channel_layer=None):
        self._channel_layer = channel_layer

    @property
    def channel_layer(self):
        if self._channel_layer is None:
            self._channel_layer = get_channel_layer()
        return self._channel_layer

    def emit(self, channel_id: str, event_name: str, payload: dict[str, Any]) -> None:
        layer = self.channel_layer
        if layer is None:
            raise DeliveryError(
                "No channel layer configured", code="no_channel_layer", is_permanent=True
            )
        async_to_sync(layer.group_send)(
            group_name_for(channel_id),
            {
                "type": CONSUMER_HANDLER,
                "event": event_name,
                "data": payload,
            },
        )


class DjangoEmailTransport:
    """Email transport using the configured Django EMAIL_BACKEND."""

    def __init__(self, from_email: str | None = None):
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL

    def send(self, to: str, subject: str, html: str) -> None:
        if not to:
            raise DeliveryError("Recipient has no email address", code="invalid_email", is_permanent=True)
        send_mail(
            subject=subject,
            message=strip_tags(html),
            from_email=self.from_email,
            recipient_list=[to],
            html_message=html,
            fail_silently=False,
        )


# =============================================================================
# Results
# =============================================================================


@dataclass
class PushReport:
    """
    Outcome of the realtime leg.

    Attributes:
        delivered: Receiver ids the transport accepted
        failed: Receiver id -> error message for rejected emits
    """

    delivered: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        return len(self.delivered) + len(self.failed)


@dataclass
class EmailResult:
    """Outcome of one email attempt."""

    user_id: int
    email: str
    status: str
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# Dispatcher
# =============================================================================


class DeliveryDispatcher:
    """
    Fans a persisted notification out over the injected transports.

    Args:
        transport: RealtimeTransport (defaults to ChannelLayerTransport)
        email_transport: EmailTransport (defaults to DjangoEmailTransport)
    """

    def __init__(
        self,
        transport: RealtimeTransport | None = None,
        email_transport: EmailTransport | None = None,
    ):
        self.transport = transport or ChannelLayerTransport()
        self.email_transport = email_transport or DjangoEmailTransport()

    def push(
        self,
        notification: Notification,
        recipients: Iterable[User],
        event_name: str = RealtimeEvent.NEW_NOTIFICATION,
        payload: dict[str, Any] | None = None,
    ) -> PushReport:
        """
        Emit one event per receiver, isolating failures.

        Args:
            notification: The persisted record
            recipients: In-app-eligible receivers
            event_name: Realtime event name
            payload: Event data (defaults to the serialized record)

        Returns:
            PushReport
        """
        if payload is None:
            payload = notification_payload(notification)

        report = PushReport()
        for user in recipients:
            try:
                self.transport.emit(str(user.id), str(event_name), payload)
            except Exception as exc:
                report.failed[user.id] = str(exc)
                logger.warning(
                    f"Realtime push of notification {notification.id} to user "
                    f"{user.id} failed: {exc}"
                )
                continue
            report.delivered.append(user.id)
            logger.debug(f"Pushed {event_name} for notification {notification.id} to user {user.id}")

        if report.attempted:
            logger.info(
                f"Notification {notification.id} pushed to {len(report.delivered)}/"
                f"{report.attempted} receivers"
            )
        return report

    def send_emails(
        self,
        recipients: Iterable[User],
        subject: str,
        html: str,
    ) -> list[EmailResult]:
        """
        Send one email per receiver, recording each outcome.

        Args:
            recipients: Email-eligible receivers
            subject: Email subject
            html: HTML body

        Returns:
            One EmailResult per receiver, in order
        """
        results: list[EmailResult] = []
        for user in recipients:
            try:
                self.email_transport.send(user.email, subject, html)
            except Exception as exc:
                logger.warning(f"Notification email to user {user.id} failed: {exc}")
                results.append(
                    EmailResult(user_id=user.id, email=user.email, status=EMAIL_FAILED, error=str(exc))
                )
                continue
            results.append(EmailResult(user_id=user.id, email=user.email, status=EMAIL_SENT))

        if results:
            sent = sum(1 for r in results if r.status == EMAIL_SENT)
            logger.info(f"Notification emails sent {sent}/{len(results)}")
        return results
