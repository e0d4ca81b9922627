"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/notifications/         - Notification endpoints
        send-to-user/              - Send to a single user (by id or email)
        send-to-all/               - Broadcast to every user (admin)
        send-to-admins/            - Broadcast to every admin except the sender
        send-to-category/          - Send to owners of habits in a category (admin)
        send-system/               - System broadcast (admin)
        habit-reminder/            - Habit reminder to the caller
        unread-count/              - Unread badge count
        read-all/                  - Mark all as read
        {id}/read/                 - Mark one as read
        {id}/unread/               - Mark one as unread
        {id}/                      - Hide one (DELETE)
        preferences/               - Caller's delivery preferences
        settings/                  - System notification toggles

WebSocket routes live in notifications.routing and are wired in config.asgi.

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    # Notifications
    path("notifications/", include("notifications.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Habit Notifications Admin"
admin.site.site_title = "Notifications Admin"
admin.site.index_title = "Users, habits and notifications"
