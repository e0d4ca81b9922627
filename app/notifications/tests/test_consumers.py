"""
WebSocket tests for the notification stream.

Covers:
- Anonymous sockets are rejected
- Authenticated sockets receive events emitted for their user only
- JWTAuthMiddleware token handling
"""

import pytest
import pytest_asyncio
from asgiref.sync import sync_to_async
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser
from rest_framework_simplejwt.tokens import AccessToken

from notifications.consumers import NotificationConsumer
from notifications.delivery import ChannelLayerTransport
from notifications.middleware import JWTAuthMiddleware
from notifications.routing import websocket_urlpatterns

WS_PATH = "/ws/notifications/"


@pytest_asyncio.fixture(autouse=True)
async def fresh_channel_layer():
    layer = get_channel_layer()
    await layer.flush()
    yield layer
    await layer.flush()


async def connect_as(user):
    communicator = WebsocketCommunicator(NotificationConsumer.as_asgi(), WS_PATH)
    communicator.scope["user"] = user
    connected, _ = await communicator.connect()
    return communicator, connected


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
class TestNotificationConsumer:
    async def test_anonymous_rejected(self):
        _, connected = await connect_as(AnonymousUser())

        assert connected is False

    async def test_receives_events_for_own_user(self, user):
        communicator, connected = await connect_as(user)
        assert connected

        transport = ChannelLayerTransport()
        await sync_to_async(transport.emit)(
            str(user.id), "new-notification", {"id": 1, "title": "Hello"}
        )

        message = await communicator.receive_json_from(timeout=1)
        assert message == {"event": "new-notification", "data": {"id": 1, "title": "Hello"}}

        await communicator.disconnect()

    async def test_does_not_receive_other_users_events(self, user, other_user):
        communicator, _ = await connect_as(user)

        await sync_to_async(ChannelLayerTransport().emit)(
            str(other_user.id), "habit-reminder", {"id": 2}
        )

        assert await communicator.receive_nothing(timeout=0.2)
        await communicator.disconnect()

    async def test_ping(self, user):
        communicator, _ = await connect_as(user)

        await communicator.send_json_to({"type": "ping"})

        assert await communicator.receive_json_from(timeout=1) == {"event": "pong"}
        await communicator.disconnect()


@pytest.mark.asyncio
@pytest.mark.django_db(transaction=True)
class TestJWTAuthMiddleware:
    def app(self):
        return JWTAuthMiddleware(URLRouter(websocket_urlpatterns))

    async def test_valid_token_connects(self, user):
        token = await sync_to_async(AccessToken.for_user)(user)
        communicator = WebsocketCommunicator(self.app(), f"{WS_PATH}?token={token}")

        connected, _ = await communicator.connect()

        assert connected
        await communicator.disconnect()

    async def test_invalid_token_rejected(self):
        communicator = WebsocketCommunicator(self.app(), f"{WS_PATH}?token=not-a-jwt")

        connected, _ = await communicator.connect()

        assert connected is False

    async def test_missing_token_rejected(self):
        communicator = WebsocketCommunicator(self.app(), WS_PATH)

        connected, _ = await communicator.connect()

        assert connected is False

    async def test_deleted_user_rejected(self, deleted_user):
        token = await sync_to_async(AccessToken.for_user)(deleted_user)
        communicator = WebsocketCommunicator(self.app(), f"{WS_PATH}?token={token}")

        connected, _ = await communicator.connect()

        assert connected is False
