"""
WebSocket URL routing for notifications.

URL Patterns:
    ws/notifications/ - Per-user realtime notification stream

Authentication:
    JWT token passed as query parameter: ?token=<jwt_access_token>
    JWTAuthMiddleware validates it and attaches the user to the scope.
"""

from django.urls import path

from notifications import consumers

websocket_urlpatterns = [
    path("ws/notifications/", consumers.NotificationConsumer.as_asgi()),
]
