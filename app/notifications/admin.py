"""
Django admin configuration for notification models.

Registers:
- Notification (with receiver rows inline)
- NotificationSettings (singleton)
"""

from django.contrib import admin

from notifications.models import Notification, NotificationRecipient, NotificationSettings


class NotificationRecipientInline(admin.TabularInline):
    """Per-receiver state rows, read-only."""

    model = NotificationRecipient
    extra = 0
    raw_id_fields = ["user"]
    readonly_fields = ["user", "is_read", "read_at", "is_deleted", "deleted_at"]
    can_delete = False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """
    Admin configuration for Notification.

    Provides read-only view of notifications for debugging and support.
    """

    list_display = ["id", "type", "title", "sender", "category", "created_at"]
    list_filter = ["type", "category", "created_at"]
    search_fields = ["title", "message", "sender__email"]
    ordering = ["-created_at"]
    raw_id_fields = ["sender", "related_habit"]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [NotificationRecipientInline]


@admin.register(NotificationSettings)
class NotificationSettingsAdmin(admin.ModelAdmin):
    """Admin configuration for the system notification toggles."""

    list_display = [
        "__str__",
        "habit_reminder_notify",
        "streak_milestone_notify",
        "weekly_summary_notify",
        "monthly_summary_notify",
        "updated_at",
    ]
    readonly_fields = ["updated_by", "updated_at"]

    def has_add_permission(self, request):
        """Only one settings row exists; it is created on first load."""
        return not NotificationSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        obj.updated_by = request.user
        super().save_model(request, obj, form, change)
