"""
Django admin configuration for authentication models.

Related files:
    - models.py: Model definitions
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin configuration for User model.

    Customized for email-based authentication, with role and delivery
    preferences editable.
    """

    # List display
    list_display = (
        "email",
        "role",
        "notifications_enabled",
        "is_active",
        "is_deleted",
        "date_joined",
    )
    list_filter = (
        "role",
        "notifications_enabled",
        "is_active",
        "is_deleted",
        "is_staff",
        "date_joined",
    )
    search_fields = ("email",)
    ordering = ("-date_joined",)

    # Field configuration
    fieldsets = (
        (None, {"fields": ("email", "password", "role")}),
        (
            "Notifications",
            {
                "fields": (
                    "notifications_enabled",
                    "preferences",
                    "preferred_notification_time",
                )
            },
        ),
        (
            "Status",
            {"fields": ("is_active", "is_staff", "is_superuser", "is_deleted", "deleted_at")},
        ),
        (
            "Permissions",
            {"fields": ("groups", "user_permissions")},
        ),
        (
            "Important dates",
            {"fields": ("date_joined", "last_login")},
        ),
    )

    # Fields for creating a new user
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "role", "password1", "password2"),
            },
        ),
    )

    readonly_fields = ("date_joined", "last_login", "deleted_at")
