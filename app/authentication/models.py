"""
Authentication models.

This module defines the user model that the notification engine reads as its
user directory:
- User: Email-based user with a role, soft delete and delivery preferences

Related files:
    - managers.py: UserQuerySet (directory lookups) and UserManager
    - notifications/preferences.py: Pure functions that read the preference
      fields defined here

Security:
    - User passwords hashed with Django's PBKDF2
    - Soft-deleted users keep their row but are excluded from every lookup
      used to address notifications
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager
from core.model_mixins import SoftDeleteMixin


class UserRole(models.TextChoices):
    """Roles that drive notification targeting rules."""

    USER = "user", "User"
    ADMIN = "admin", "Admin"


class Theme(models.TextChoices):
    """UI theme stored alongside delivery preferences."""

    LIGHT = "light", "Light"
    DARK = "dark", "Dark"


class PreferredTime(models.TextChoices):
    """Time of day a user prefers reminders."""

    MORNING = "morning", "Morning"
    AFTERNOON = "afternoon", "Afternoon"
    EVENING = "evening", "Evening"


def default_preferences():
    """
    Default preference document for new users.

    Keys:
        theme: UI theme ("light" or "dark")
        notifications: In-app (realtime) delivery opt-in
        email_reminders: Email delivery opt-in
    """
    return {
        "theme": Theme.LIGHT,
        "notifications": True,
        "email_reminders": True,
    }


class User(SoftDeleteMixin, AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        role: "user" or "admin", used by notification targeting
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        is_deleted / deleted_at: Soft delete state (SoftDeleteMixin)
        notifications_enabled: Global notification gate; False blocks
            every channel regardless of per-channel flags
        preferences: JSON document with "notifications" (in-app),
            "email_reminders" (email) and "theme"
        preferred_notification_time: morning / afternoon / evening, blank
            when unset
        date_joined: When the user account was created
        updated_at: When the user record was last modified

    Usage:
        user = User.objects.create_user(
            email='user@example.com',
            password='securepassword'
        )

        admin = User.objects.create_superuser(
            email='admin@example.com',
            password='adminpassword'
        )
        assert admin.role == UserRole.ADMIN
    """

    # Primary identifier (replaces username)
    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )

    role = models.CharField(
        max_length=10,
        choices=UserRole.choices,
        default=UserRole.USER,
        db_index=True,
        help_text="Role used for notification targeting rules",
    )

    # Account status flags
    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    # Delivery preferences
    notifications_enabled = models.BooleanField(
        default=True,
        help_text="Global notification gate. When off, nothing is pushed or emailed.",
    )
    preferences = models.JSONField(
        default=default_preferences,
        blank=True,
        help_text="Per-channel opt-ins and UI theme",
    )
    preferred_notification_time = models.CharField(
        max_length=10,
        choices=PreferredTime.choices,
        blank=True,
        default="",
        help_text="Preferred reminder time of day (blank means unset)",
    )

    # Timestamps
    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    # Configure email as the username field
    USERNAME_FIELD = "email"

    # Email is automatically required since it's the USERNAME_FIELD
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        """Return the user's email as string representation."""
        return self.email

    def get_full_name(self):
        return self.email

    def get_short_name(self):
        return self.email.split("@")[0]

    @property
    def is_admin(self):
        """Whether the user holds the admin role."""
        return self.role == UserRole.ADMIN
