"""
WebSocket consumer for realtime notifications.

Each authenticated socket joins the private group of its user
(``group_name_for(user.id)``). DeliveryDispatcher emits into that group,
so every open socket of the user receives the event.

Message Types (to client):
    {"event": "new-notification", "data": {...serialized notification...}}
    {"event": "habit-reminder", "data": {"id", "habit_name", "preferred_time",
                                         "message", "created_at"}}
    {"event": "pong"}
    {"event": "error", "data": {"message": ...}}

Message Types (from client):
    {"type": "ping"}

Close codes:
    4001: Unauthenticated
"""

from __future__ import annotations

import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from notifications.delivery import group_name_for

logger = logging.getLogger(__name__)


class NotificationConsumer(AsyncJsonWebsocketConsumer):
    """
    Push-only consumer for a user's notification stream.

    Attributes:
        group_name: Channel layer group of the connected user
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.group_name: str | None = None

    async def connect(self):
        user = self.scope.get("user")

        if not user or not user.is_authenticated:
            logger.warning("Rejected unauthenticated notification socket")
            await self.close(code=4001)
            return

        self.group_name = group_name_for(user.id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        logger.info(f"User {user.id} connected to notification stream")

    async def disconnect(self, close_code):
        if self.group_name:
            await self.channel_layer.group_discard(self.group_name, self.channel_name)
            logger.info(f"Notification socket left {self.group_name} (code={close_code})")

    async def receive_json(self, content, **kwargs):
        if isinstance(content, dict) and content.get("type") == "ping":
            await self.send_json({"event": "pong"})
            return
        await self.send_json(
            {"event": "error", "data": {"message": "Unsupported message"}}
        )

    async def notification_event(self, event):
        """Handle notification.event messages from the channel layer."""
        await self.send_json({"event": event["event"], "data": event["data"]})
