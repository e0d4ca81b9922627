"""
Protocol definitions (interfaces) for delivery transports.

The dispatcher depends on these contracts, not on Channels or Django mail
directly, so tests can pass in-memory fakes.

Available Protocols:
    RealtimeTransport: Room-addressable realtime emit
    EmailTransport: Single-recipient HTML email

Usage:
    from notifications.protocols import RealtimeTransport

    class RecordingTransport:
        def __init__(self):
            self.events = []

        def emit(self, channel_id, event_name, payload):
            self.events.append((channel_id, event_name, payload))

    # RecordingTransport is a valid RealtimeTransport without inheriting
    transport: RealtimeTransport = RecordingTransport()

Note:
    - @runtime_checkable allows isinstance() checks
    - Implementations signal failure by raising; the dispatcher catches per
      recipient
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import Any


@runtime_checkable
class RealtimeTransport(Protocol):
    """
    Protocol for realtime push transports.

    Example:
        class ChannelLayerTransport:
            def emit(self, channel_id, event_name, payload):
                async_to_sync(layer.group_send)(group_for(channel_id), {...})
    """

    def emit(self, channel_id: str, event_name: str, payload: dict[str, Any]) -> None:
        """
        Emit an event to one private channel.

        Args:
            channel_id: Stringified user id of the receiver
            event_name: Event name (e.g. "new-notification")
            payload: JSON-serializable event data

        Raises:
            Exception: Any failure; delivery is best-effort
        """
        ...


@runtime_checkable
class EmailTransport(Protocol):
    """
    Protocol for email transports.

    Example:
        class DjangoEmailTransport:
            def send(self, to, subject, html):
                send_mail(subject, strip_tags(html), None, [to], html_message=html)
    """

    def send(self, to: str, subject: str, html: str) -> None:
        """
        Send one HTML email.

        Args:
            to: Recipient address
            subject: Email subject
            html: HTML body

        Raises:
            Exception: Any failure; recorded as a failed per-recipient result
        """
        ...
