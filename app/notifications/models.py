"""
Notification system models.

This module defines the persisted state of the notification engine:
- Notification: One shared record per send, naming every receiver
- NotificationRecipient: Per-receiver projection (read / hidden state)
- NotificationSettings: System-wide toggles managed by admins (singleton)

Design Decisions:
    - A send creates exactly one Notification plus one NotificationRecipient
      row per receiver, inside one transaction; receivers are never added later
    - readBy / deletedBy are not stored as lists: they are the receiver rows
      with is_read / is_deleted set, so both are always subsets of receivers
    - (notification, user) is unique, so every per-user mutation is a single
      conditional UPDATE on one row and concurrent calls converge
    - Sender and related habit use SET_NULL (records outlive them)
    - Records are never physically deleted by the API; "delete" hides the
      record for one receiver only

Usage:
    from notifications.models import Notification, NotificationType

    notification = Notification.objects.create_for_receivers(
        receivers=[alice, bob],
        sender=admin,
        type=NotificationType.ADMIN_BROADCAST,
        title="Maintenance",
        message="Down at 02:00 UTC",
    )

    Notification.objects.visible_to(alice)[:50]
    Notification.objects.unread_for(alice).count()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.core.cache import cache
from django.db import models, transaction
from django.db.models import Exists, OuterRef
from django.utils import timezone

from core.models import BaseModel
from habits.models import HabitCategory

if TYPE_CHECKING:
    from collections.abc import Iterable

    from authentication.models import User


# =============================================================================
# Enums
# =============================================================================


class NotificationType(models.TextChoices):
    """Kinds of notification the engine can send."""

    HABIT_REMINDER = "habit_reminder", "Habit reminder"
    STREAK_MILESTONE = "streak_milestone", "Streak milestone"
    ACHIEVEMENT = "achievement", "Achievement"
    SYSTEM = "system", "System"
    USER = "user", "User"
    ADMIN_BROADCAST = "admin_broadcast", "Admin broadcast"
    CATEGORY_ALERT = "category_alert", "Category alert"
    USER_MESSAGE = "user_message", "User message"


class RealtimeEvent(models.TextChoices):
    """Event names emitted on a user's realtime channel."""

    NEW_NOTIFICATION = "new-notification", "New notification"
    HABIT_REMINDER = "habit-reminder", "Habit reminder"


# =============================================================================
# Notification
# =============================================================================


class NotificationQuerySet(models.QuerySet):
    """Queries scoped to one receiver's view of the shared records."""

    def create_for_receivers(
        self,
        receivers: Iterable[User],
        sender: User | None,
        type: str,
        title: str,
        message: str,
        category: str | None = None,
        related_habit=None,
        action_url: str | None = None,
    ) -> Notification:
        """
        Persist a record and one receiver row per user, atomically.

        The store does not filter: the caller decides who receives.
        Duplicate users in ``receivers`` are collapsed.

        Returns:
            The created Notification
        """
        unique_receivers = list({user.pk: user for user in receivers}.values())

        with transaction.atomic():
            notification = self.create(
                sender=sender,
                type=type,
                title=title,
                message=message,
                category=category or "",
                related_habit=related_habit,
                action_url=action_url or "",
            )
            NotificationRecipient.objects.bulk_create(
                [
                    NotificationRecipient(notification=notification, user=user)
                    for user in unique_receivers
                ]
            )
        return notification

    def visible_to(self, user: User) -> NotificationQuerySet:
        """
        Records the user received and has not hidden, newest first.

        Each record is annotated with ``is_read_by_user`` for that user.
        """
        receipt = NotificationRecipient.objects.filter(
            notification=OuterRef("pk"), user=user
        )
        return (
            self.filter(recipients__user=user, recipients__is_deleted=False)
            .annotate(is_read_by_user=Exists(receipt.filter(is_read=True)))
            .select_related("sender", "related_habit")
            .order_by("-created_at", "-id")
        )

    def unread_for(self, user: User) -> NotificationQuerySet:
        """Records the user received, has not read and has not hidden."""
        return self.filter(
            recipients__user=user,
            recipients__is_deleted=False,
            recipients__is_read=False,
        )


class Notification(BaseModel):
    """
    A notification shared by every receiver of one send.

    Fields:
        sender: User who sent it (None for system-originated records)
        type: NotificationType value
        title / message: Non-empty display text
        category: Habit category for category broadcasts (blank otherwise)
        related_habit: Habit the notification is about (optional)
        action_url: Client deep link (optional)
        receivers: Users named by the send (through NotificationRecipient)

    Derived sets:
        receiver_ids, read_by, deleted_by: id sets computed from receiver rows

    Inherits from BaseModel:
        created_at: Timestamp (auto, indexed)
        updated_at: Timestamp (auto)
    """

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sent_notifications",
        help_text="User who sent this notification (optional)",
    )

    type = models.CharField(
        max_length=32,
        choices=NotificationType.choices,
        db_index=True,
        help_text="Kind of notification",
    )

    title = models.CharField(
        max_length=500,
        help_text="Notification title",
    )

    message = models.TextField(
        help_text="Notification body",
    )

    category = models.CharField(
        max_length=20,
        choices=HabitCategory.choices,
        blank=True,
        default="",
        help_text="Habit category the notification targeted (category alerts)",
    )

    related_habit = models.ForeignKey(
        "habits.Habit",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notifications",
        help_text="Habit this notification refers to (optional)",
    )

    action_url = models.CharField(
        max_length=500,
        blank=True,
        default="",
        help_text="Client deep link opened from the notification",
    )

    receivers = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        through="NotificationRecipient",
        related_name="received_notifications",
        help_text="Users this notification was addressed to",
    )

    objects = NotificationQuerySet.as_manager()

    class Meta(BaseModel.Meta):
        db_table = "notifications_notification"
        indexes = [
            models.Index(fields=["type", "-created_at"], name="notif_type_created_idx"),
        ]

    def __str__(self) -> str:
        return f"Notification({self.type}) {self.title!r}"

    @property
    def receiver_ids(self) -> set[int]:
        return set(self.recipients.values_list("user_id", flat=True))

    @property
    def read_by(self) -> set[int]:
        return set(
            self.recipients.filter(is_read=True).values_list("user_id", flat=True)
        )

    @property
    def deleted_by(self) -> set[int]:
        return set(
            self.recipients.filter(is_deleted=True).values_list("user_id", flat=True)
        )


# =============================================================================
# Per-receiver state
# =============================================================================


class NotificationRecipientQuerySet(models.QuerySet):
    """
    Single-statement state transitions on receiver rows.

    Every transition filters on the current state so repeating it updates
    zero rows; the returned count is the number of rows that changed.
    """

    def for_user(self, user: User) -> NotificationRecipientQuerySet:
        return self.filter(user=user)

    def visible(self) -> NotificationRecipientQuerySet:
        return self.filter(is_deleted=False)

    def mark_read(self) -> int:
        return self.visible().filter(is_read=False).update(
            is_read=True, read_at=timezone.now()
        )

    def mark_unread(self) -> int:
        return self.visible().filter(is_read=True).update(is_read=False, read_at=None)

    def hide(self) -> int:
        return self.visible().update(is_deleted=True, deleted_at=timezone.now())


class NotificationRecipient(models.Model):
    """
    One receiver of one notification, with that receiver's private state.

    Fields:
        notification: The shared record
        user: The receiver
        is_read / read_at: Membership in the record's read set
        is_deleted / deleted_at: Membership in the record's hidden set;
            terminal for that receiver
    """

    notification = models.ForeignKey(
        Notification,
        on_delete=models.CASCADE,
        related_name="recipients",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notification_receipts",
    )
    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    is_deleted = models.BooleanField(default=False)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = NotificationRecipientQuerySet.as_manager()

    class Meta:
        db_table = "notifications_recipient"
        constraints = [
            models.UniqueConstraint(
                fields=["notification", "user"],
                name="notif_recipient_unique",
            ),
        ]
        indexes = [
            # Inbox and badge queries
            models.Index(
                fields=["user", "is_deleted", "is_read"],
                name="notif_recipient_state_idx",
            ),
        ]

    def __str__(self) -> str:
        state = "read" if self.is_read else "unread"
        if self.is_deleted:
            state = "hidden"
        return f"Notification {self.notification_id} -> User {self.user_id} [{state}]"


# =============================================================================
# System settings
# =============================================================================


SETTINGS_CACHE_KEY = "notifications:settings"
SETTINGS_CACHE_TTL = 300  # 5 minutes


class NotificationSettings(models.Model):
    """
    System-wide notification toggles (single row).

    Fields:
        habit_reminder_notify: Allow habit_reminder sends
        streak_milestone_notify: Allow streak_milestone sends
        weekly_summary_notify: Weekly summary job toggle
        monthly_summary_notify: Monthly summary job toggle
        updated_by: Admin who last changed the settings

    Usage:
        settings = NotificationSettings.load()
        if not settings.allows(NotificationType.HABIT_REMINDER):
            ...
    """

    SINGLETON_PK = 1

    habit_reminder_notify = models.BooleanField(default=True)
    streak_milestone_notify = models.BooleanField(default=True)
    weekly_summary_notify = models.BooleanField(default=True)
    monthly_summary_notify = models.BooleanField(default=True)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "notification settings"
        verbose_name_plural = "notification settings"

    def __str__(self) -> str:
        return "Notification settings"

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)
        cache.delete(SETTINGS_CACHE_KEY)

    @classmethod
    def load(cls) -> NotificationSettings:
        """Return the settings row, creating it with defaults on first use."""
        cached = cache.get(SETTINGS_CACHE_KEY)
        if cached is not None:
            return cached
        instance, _ = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        cache.set(SETTINGS_CACHE_KEY, instance, timeout=SETTINGS_CACHE_TTL)
        return instance

    def allows(self, notification_type: str) -> bool:
        """Whether sends of this type are currently permitted."""
        if notification_type == NotificationType.HABIT_REMINDER:
            return self.habit_reminder_notify
        if notification_type == NotificationType.STREAK_MILESTONE:
            return self.streak_milestone_notify
        return True
