"""
Views for notification API.

ViewSets:
    NotificationViewSet: Inbox, send, preference and settings endpoints

Endpoints:
    Inbox:
        GET    /api/v1/notifications/ - List caller's visible notifications
        GET    /api/v1/notifications/unread-count/ - Unread badge count
        POST   /api/v1/notifications/{id}/read/ - Mark one as read
        POST   /api/v1/notifications/{id}/unread/ - Mark one as unread
        POST   /api/v1/notifications/read-all/ - Mark all as read
        DELETE /api/v1/notifications/{id}/ - Hide one for the caller

    Send:
        POST /api/v1/notifications/send-to-user/
        POST /api/v1/notifications/send-to-all/ (admin)
        POST /api/v1/notifications/send-to-admins/
        POST /api/v1/notifications/send-to-category/ (admin)
        POST /api/v1/notifications/send-system/ (admin)
        POST /api/v1/notifications/habit-reminder/

    Preferences and settings:
        GET/PATCH /api/v1/notifications/preferences/
        GET/PUT   /api/v1/notifications/settings/ (PUT admin only)

Usage:
    # In urls.py
    router = SimpleRouter()
    router.register(r"", NotificationViewSet, basename="notification")
"""

from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from drf_spectacular.utils import (
    extend_schema,
    extend_schema_view,
    OpenApiParameter,
    OpenApiResponse,
)

from notifications.models import NotificationType
from notifications.serializers import (
    HabitReminderSerializer,
    MarkAllReadResponseSerializer,
    NotificationSerializer,
    NotificationSettingsSerializer,
    PreferencesSerializer,
    SendNotificationSerializer,
    SendResultSerializer,
    SendToCategorySerializer,
    SendToUserSerializer,
    UnreadCountSerializer,
)
from notifications.services import (
    NotificationService,
    NotificationSettingsService,
    NotificationStateService,
    PreferenceService,
)

SEND_RESPONSES = {
    201: SendResultSerializer,
    400: OpenApiResponse(description="Invalid payload, type disabled, or no receivers"),
    403: OpenApiResponse(description="Role not allowed for this targeting mode"),
    404: OpenApiResponse(description="Receiver or habit not found"),
}


def error_response(result) -> Response:
    """Translate a failed ServiceResult into a Response."""
    return Response(result.to_response(), status=result.http_status)


def send_response(result) -> Response:
    """Translate a send ServiceResult into a 201 or error Response."""
    if not result:
        return error_response(result)

    outcome = result.data
    body = {
        "notification": outcome.notification,
        "receiver_count": outcome.receiver_count,
        "in_app_count": outcome.in_app_count,
        "email_count": outcome.email_count,
        "push_failures": outcome.push_failures,
        "email_results": [r.to_dict() for r in outcome.email_results],
        "email_queued": outcome.email_queued,
    }
    return Response(SendResultSerializer(body).data, status=status.HTTP_201_CREATED)


@extend_schema_view(
    list=extend_schema(
        operation_id="list_notifications",
        summary="List notifications",
        description=(
            "Visible notifications for the authenticated user, newest first. "
            "Hidden notifications are never returned."
        ),
        parameters=[
            OpenApiParameter(
                name="limit",
                type=int,
                location=OpenApiParameter.QUERY,
                description="Maximum number of records (capped at the page size)",
                required=False,
            ),
        ],
        responses={200: NotificationSerializer(many=True)},
        tags=["Notifications - Inbox"],
    ),
    destroy=extend_schema(
        operation_id="delete_notification",
        summary="Delete notification",
        description=(
            "Hide a notification for the caller only. Other receivers keep it. "
            "Hiding is permanent for the caller."
        ),
        responses={
            204: OpenApiResponse(description="Hidden"),
            404: OpenApiResponse(description="Caller is not a receiver"),
        },
        tags=["Notifications - Inbox"],
    ),
)
class NotificationViewSet(viewsets.GenericViewSet):
    """
    ViewSet for notification operations.

    Permissions:
    - All endpoints require authentication
    - Inbox endpoints only touch the caller's receiver rows
    - Role checks for send modes live in RecipientSelector
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer
    # Keeps {pk}/ from shadowing the named collection routes
    lookup_value_regex = r"\d{1,18}"

    # -------------------------------------------------------------------------
    # Inbox
    # -------------------------------------------------------------------------

    def list(self, request):
        limit = request.query_params.get("limit")
        try:
            limit = max(int(limit), 1) if limit else None
        except ValueError:
            limit = None

        notifications = NotificationStateService.list_for(request.user, limit=limit)
        serializer = self.get_serializer(notifications, many=True)
        return Response(serializer.data)

    def destroy(self, request, pk=None):
        result = NotificationStateService.delete(int(pk), request.user)
        if not result:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="get_unread_notification_count",
        summary="Get unread notification count",
        description="Count of visible unread notifications for badge display.",
        responses={200: UnreadCountSerializer},
        tags=["Notifications - Inbox"],
    )
    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):
        """
        Get count of unread notifications.

        Returns:
            {"unread_count": <int>}
        """
        count = NotificationStateService.unread_count(request.user)
        return Response(UnreadCountSerializer({"unread_count": count}).data)

    @extend_schema(
        operation_id="mark_notification_read",
        summary="Mark notification as read",
        description=(
            "Mark a single notification as read for the caller. "
            "Idempotent: already-read notifications return success."
        ),
        request=None,
        responses={
            200: NotificationSerializer,
            404: OpenApiResponse(description="Not a receiver, or hidden"),
        },
        tags=["Notifications - Inbox"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        result = NotificationStateService.mark_read(int(pk), request.user)
        if not result:
            return error_response(result)
        return Response(self.get_serializer(result.data).data)

    @extend_schema(
        operation_id="mark_notification_unread",
        summary="Mark notification as unread",
        description="Mark a single notification as unread for the caller. Idempotent.",
        request=None,
        responses={
            200: NotificationSerializer,
            404: OpenApiResponse(description="Not a receiver, or hidden"),
        },
        tags=["Notifications - Inbox"],
    )
    @action(detail=True, methods=["post"])
    def unread(self, request, pk=None):
        result = NotificationStateService.mark_unread(int(pk), request.user)
        if not result:
            return error_response(result)
        return Response(self.get_serializer(result.data).data)

    @extend_schema(
        operation_id="mark_all_notifications_read",
        summary="Mark all notifications as read",
        description="Mark every visible unread notification of the caller as read.",
        request=None,
        responses={200: MarkAllReadResponseSerializer},
        tags=["Notifications - Inbox"],
    )
    @action(detail=False, methods=["post"], url_path="read-all")
    def read_all(self, request):
        """
        Returns:
            {"marked_count": <int>}
        """
        result = NotificationStateService.mark_all_read(request.user)
        return Response(MarkAllReadResponseSerializer({"marked_count": result.data}).data)

    # -------------------------------------------------------------------------
    # Send
    # -------------------------------------------------------------------------

    @extend_schema(
        operation_id="send_notification_to_user",
        summary="Send to one user",
        description=(
            "Send to a single receiver by receiver_id or receiver_email. "
            "Users may only address admins; nobody may address themselves."
        ),
        request=SendToUserSerializer,
        responses=SEND_RESPONSES,
        tags=["Notifications - Send"],
    )
    @action(detail=False, methods=["post"], url_path="send-to-user")
    def send_to_user(self, request):
        serializer = SendToUserSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = NotificationService.send_to_user(
            request.user,
            receiver_id=data.get("receiver_id"),
            receiver_email=data.get("receiver_email"),
            type=data.get("type", NotificationType.USER_MESSAGE),
            **self._common_fields(data),
        )
        return send_response(result)

    @extend_schema(
        operation_id="send_notification_to_all_users",
        summary="Broadcast to all users",
        description="Send to every active user with role user. Admin only.",
        request=SendNotificationSerializer,
        responses=SEND_RESPONSES,
        tags=["Notifications - Send"],
    )
    @action(detail=False, methods=["post"], url_path="send-to-all")
    def send_to_all(self, request):
        data = self._validated(SendNotificationSerializer, request)
        result = NotificationService.send_to_all_users(
            request.user,
            type=data.get("type", NotificationType.ADMIN_BROADCAST),
            **self._common_fields(data),
        )
        return send_response(result)

    @extend_schema(
        operation_id="send_notification_to_admins",
        summary="Send to all admins",
        description="Send to every active admin except the sender.",
        request=SendNotificationSerializer,
        responses=SEND_RESPONSES,
        tags=["Notifications - Send"],
    )
    @action(detail=False, methods=["post"], url_path="send-to-admins")
    def send_to_admins(self, request):
        data = self._validated(SendNotificationSerializer, request)
        result = NotificationService.send_to_all_admins(
            request.user,
            type=data.get("type", NotificationType.USER_MESSAGE),
            **self._common_fields(data),
        )
        return send_response(result)

    @extend_schema(
        operation_id="send_notification_to_category",
        summary="Send to a habit category",
        description=(
            "Send to every active user owning at least one active habit in the "
            "category. Admin only."
        ),
        request=SendToCategorySerializer,
        responses=SEND_RESPONSES,
        tags=["Notifications - Send"],
    )
    @action(detail=False, methods=["post"], url_path="send-to-category")
    def send_to_category(self, request):
        data = self._validated(SendToCategorySerializer, request)
        result = NotificationService.send_to_category(
            request.user,
            category=data["category"],
            type=data.get("type", NotificationType.CATEGORY_ALERT),
            **self._common_fields(data),
        )
        return send_response(result)

    @extend_schema(
        operation_id="send_system_notification",
        summary="System broadcast",
        description="Send a system notification to every active user. Admin only.",
        request=SendNotificationSerializer,
        responses=SEND_RESPONSES,
        tags=["Notifications - Send"],
    )
    @action(detail=False, methods=["post"], url_path="send-system")
    def send_system(self, request):
        data = self._validated(SendNotificationSerializer, request)
        result = NotificationService.send_system(
            request.user,
            type=data.get("type", NotificationType.SYSTEM),
            **self._common_fields(data),
        )
        return send_response(result)

    @extend_schema(
        operation_id="send_habit_reminder",
        summary="Send a habit reminder",
        description=(
            "Create a habit reminder for the caller and push it as a "
            "habit-reminder event."
        ),
        request=HabitReminderSerializer,
        responses=SEND_RESPONSES,
        tags=["Notifications - Send"],
    )
    @action(detail=False, methods=["post"], url_path="habit-reminder")
    def habit_reminder(self, request):
        data = self._validated(HabitReminderSerializer, request)
        result = NotificationService.send_habit_reminder(
            request.user,
            habit_name=data["habit_name"],
            message=data["message"],
            habit_id=data.get("habit_id"),
            preferred_time=data.get("preferred_time"),
            send_email=data.get("send_email", False),
        )
        return send_response(result)

    # -------------------------------------------------------------------------
    # Preferences and settings
    # -------------------------------------------------------------------------

    @extend_schema(
        methods=["GET"],
        operation_id="get_notification_preferences",
        summary="Get notification preferences",
        responses={200: PreferencesSerializer},
        tags=["Notifications - Preferences"],
    )
    @extend_schema(
        methods=["PATCH"],
        operation_id="update_notification_preferences",
        summary="Update notification preferences",
        description="Partial update; omitted fields are left unchanged.",
        request=PreferencesSerializer,
        responses={200: PreferencesSerializer},
        tags=["Notifications - Preferences"],
    )
    @action(detail=False, methods=["get", "patch"], url_path="preferences")
    def preferences(self, request):
        if request.method == "GET":
            return Response(PreferenceService.get_preferences(request.user).data)

        serializer = PreferencesSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = PreferenceService.update_preferences(request.user, **serializer.validated_data)
        if not result:
            return error_response(result)
        return Response(result.data)

    @extend_schema(
        methods=["GET"],
        operation_id="get_notification_settings",
        summary="Get system notification settings",
        responses={200: NotificationSettingsSerializer},
        tags=["Notifications - Settings"],
    )
    @extend_schema(
        methods=["PUT"],
        operation_id="update_notification_settings",
        summary="Update system notification settings",
        description="Toggle notification types system-wide. Admin only.",
        request=NotificationSettingsSerializer,
        responses={
            200: NotificationSettingsSerializer,
            403: OpenApiResponse(description="Caller is not an admin"),
        },
        tags=["Notifications - Settings"],
    )
    @action(detail=False, methods=["get", "put"], url_path="settings")
    def system_settings(self, request):
        if request.method == "GET":
            instance = NotificationSettingsService.get_settings().data
            return Response(NotificationSettingsSerializer(instance).data)

        serializer = NotificationSettingsSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = NotificationSettingsService.update_settings(
            request.user, **serializer.validated_data
        )
        if not result:
            return error_response(result)
        return Response(NotificationSettingsSerializer(result.data).data)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _validated(serializer_class, request) -> dict:
        serializer = serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    @staticmethod
    def _common_fields(data: dict) -> dict:
        return {
            "title": data["title"],
            "message": data["message"],
            "action_url": data.get("action_url") or None,
            "send_email": data.get("send_email", False),
            "email_subject": data.get("email_subject") or None,
            "email_html": data.get("email_html") or None,
        }
