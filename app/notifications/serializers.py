"""
Serializers for notification API.

Serializers:
    NotificationSerializer: Read-only record as seen by one receiver
    SendNotificationSerializer: Common send fields (title, message, type, email)
    SendToUserSerializer: Single-target send (receiver_id or receiver_email)
    SendToCategorySerializer: Category send
    HabitReminderSerializer: Habit reminder to the caller
    SendResultSerializer: Response for every send endpoint
    UnreadCountSerializer: Response for unread count endpoint
    MarkAllReadResponseSerializer: Response for mark all read endpoint
    PreferencesSerializer: Caller's delivery preferences (read and partial update)
    NotificationSettingsSerializer: System notification toggles

Usage:
    from notifications.serializers import NotificationSerializer

    serializer = NotificationSerializer(notification)
    data = serializer.data
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.models import PreferredTime, Theme
from habits.models import HabitCategory, HabitTime
from notifications.models import Notification, NotificationSettings, NotificationType


class NotificationSerializer(serializers.ModelSerializer):
    """
    Serializer for Notification model.

    ``is_read`` is the requesting receiver's state: it comes from the
    ``is_read_by_user`` annotation added by Notification.objects.visible_to()
    and is False for freshly created records.

    Usage:
        serializer = NotificationSerializer(notification)
        serializer = NotificationSerializer(notifications, many=True)
    """

    sender_email = serializers.SerializerMethodField()
    is_read = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = [
            "id",
            "type",
            "title",
            "message",
            "category",
            "related_habit",
            "action_url",
            "sender",
            "sender_email",
            "is_read",
            "created_at",
        ]
        read_only_fields = fields

    def get_sender_email(self, obj: Notification) -> str | None:
        """Sender's email, or None for system records or deleted senders."""
        if obj.sender is None:
            return None
        return obj.sender.email

    def get_is_read(self, obj: Notification) -> bool:
        return bool(getattr(obj, "is_read_by_user", False))


def notification_payload(notification: Notification) -> dict:
    """Plain-dict realtime payload for a freshly created record."""
    return dict(NotificationSerializer(notification).data)


# =============================================================================
# Send requests
# =============================================================================


class SendNotificationSerializer(serializers.Serializer):
    """
    Fields shared by every send endpoint.

    ``type`` is optional; each endpoint supplies its own default. When
    ``send_email`` is true and subject/html are omitted they are rendered
    from the notification email template.
    """

    title = serializers.CharField(max_length=500)
    message = serializers.CharField()
    type = serializers.ChoiceField(choices=NotificationType.choices, required=False)
    action_url = serializers.CharField(max_length=500, required=False, allow_blank=True)
    send_email = serializers.BooleanField(required=False, default=False)
    email_subject = serializers.CharField(max_length=255, required=False, allow_blank=True)
    email_html = serializers.CharField(required=False, allow_blank=True)


class SendToUserSerializer(SendNotificationSerializer):
    """Single-target send; exactly one of receiver_id / receiver_email is used."""

    receiver_id = serializers.IntegerField(required=False, min_value=1)
    receiver_email = serializers.EmailField(required=False)

    def validate(self, attrs):
        if attrs.get("receiver_id") is None and not attrs.get("receiver_email"):
            raise serializers.ValidationError(
                {"receiver_id": ["receiver_id or receiver_email is required."]}
            )
        return attrs


class SendToCategorySerializer(SendNotificationSerializer):
    category = serializers.ChoiceField(choices=HabitCategory.choices)


class HabitReminderSerializer(serializers.Serializer):
    """Habit reminder addressed to the caller."""

    habit_id = serializers.IntegerField(required=False, min_value=1)
    habit_name = serializers.CharField(max_length=200)
    message = serializers.CharField()
    preferred_time = serializers.ChoiceField(choices=HabitTime.choices, required=False)
    send_email = serializers.BooleanField(required=False, default=False)


# =============================================================================
# Responses
# =============================================================================


class EmailResultSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    email = serializers.EmailField()
    status = serializers.ChoiceField(choices=["sent", "failed"])
    error = serializers.CharField(allow_null=True)


class SendResultSerializer(serializers.Serializer):
    """Response body for every send endpoint."""

    notification = NotificationSerializer()
    receiver_count = serializers.IntegerField()
    in_app_count = serializers.IntegerField()
    email_count = serializers.IntegerField()
    push_failures = serializers.IntegerField()
    email_results = EmailResultSerializer(many=True)
    email_queued = serializers.BooleanField()


class UnreadCountSerializer(serializers.Serializer):
    """Response serializer for unread count endpoint."""

    unread_count = serializers.IntegerField()


class MarkAllReadResponseSerializer(serializers.Serializer):
    """Response serializer for mark all read endpoint."""

    marked_count = serializers.IntegerField()


# =============================================================================
# Preferences and settings
# =============================================================================


class PreferencesSerializer(serializers.Serializer):
    """
    Caller's delivery preferences.

    Flattens the user's preference document; every field is optional on
    update (PATCH semantics).
    """

    notifications_enabled = serializers.BooleanField(required=False)
    in_app_notifications = serializers.BooleanField(required=False)
    email_reminders = serializers.BooleanField(required=False)
    theme = serializers.ChoiceField(choices=Theme.choices, required=False)
    preferred_notification_time = serializers.ChoiceField(
        choices=PreferredTime.choices, required=False, allow_blank=True
    )


class NotificationSettingsSerializer(serializers.ModelSerializer):
    """System notification toggles."""

    class Meta:
        model = NotificationSettings
        fields = [
            "habit_reminder_notify",
            "streak_milestone_notify",
            "weekly_summary_notify",
            "monthly_summary_notify",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]
