"""
Notification service layer.

This module provides the business logic for the notification system.

Services:
    NotificationService: Send operations (every targeting mode, habit reminders)
    NotificationStateService: Per-receiver inbox state (list, unread count,
        read / unread / read-all, hide)
    PreferenceService: Caller's delivery preference flags
    NotificationSettingsService: System-wide notification toggles

Send flow:
    1. System toggles gate the notification type
    2. RecipientSelector resolves receivers and channel-eligible subsets
    3. One record plus receiver rows is persisted in a transaction
    4. DeliveryDispatcher pushes to in-app-eligible receivers and, when
       requested, emails the email-eligible ones (inline or via Celery)

    Steps 1-2 fail with a ServiceResult before anything is written. Step 4
    never fails the send: per-receiver failures are reported in SendOutcome.

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure() carrying the HTTP status
    - Lower layers (selector, models) raise core.exceptions; services convert

Usage:
    from notifications.services import NotificationService, NotificationStateService

    result = NotificationService.send_to_category(
        admin, category="fitness", title="New challenge", message="Join in!"
    )
    if result:
        result.data.notification

    NotificationStateService.mark_read(notification_id, user)
    NotificationStateService.unread_count(user)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.conf import settings
from django.template.loader import render_to_string

from authentication.models import PreferredTime, UserRole
from core.exceptions import (
    BaseApplicationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.services import BaseService, ServiceResult
from habits.models import Habit
from notifications import preferences
from notifications.delivery import DeliveryDispatcher, EmailResult, PushReport
from notifications.models import (
    Notification,
    NotificationRecipient,
    NotificationSettings,
    NotificationType,
    RealtimeEvent,
)
from notifications.recipients import RecipientSelection, RecipientSelector, TargetingMode

if TYPE_CHECKING:
    from typing import Any

    from authentication.models import User


HABIT_REMINDER_TITLE = "Habit Reminder"
EMAIL_TEMPLATE = "notifications/email/notification.html"


@dataclass
class SendOutcome:
    """
    Result of a successful send.

    Attributes:
        notification: The persisted record
        selection: Receivers and channel-eligible subsets
        push_report: Realtime delivery outcome
        email_results: Per-recipient email outcomes (empty when queued or
            not requested)
        email_queued: Whether emails were handed to Celery
    """

    notification: Notification
    selection: RecipientSelection
    push_report: PushReport = field(default_factory=PushReport)
    email_results: list[EmailResult] = field(default_factory=list)
    email_queued: bool = False

    @property
    def receiver_count(self) -> int:
        return len(self.selection.receivers)

    @property
    def in_app_count(self) -> int:
        return len(self.selection.in_app_eligible)

    @property
    def email_count(self) -> int:
        return len(self.selection.email_eligible)

    @property
    def push_failures(self) -> int:
        return len(self.push_report.failed)


class NotificationService(BaseService):
    """
    Service for sending notifications.

    Methods:
        send_to_user: One receiver, by id or email
        send_to_all_users: Every active user with role "user" (admin only)
        send_to_all_admins: Every active admin except the sender
        send_to_category: Owners of active habits in a category (admin only)
        send_system: System broadcast to every active user (admin only)
        send_habit_reminder: Reminder addressed to the caller
    """

    @classmethod
    def get_dispatcher(cls) -> DeliveryDispatcher:
        """Dispatcher used for delivery; patched in tests to inject transports."""
        return DeliveryDispatcher()

    # -------------------------------------------------------------------------
    # Targeting modes
    # -------------------------------------------------------------------------

    @classmethod
    def send_to_user(
        cls,
        requester: User,
        title: str,
        message: str,
        type: str = NotificationType.USER_MESSAGE,
        receiver_id: int | None = None,
        receiver_email: str | None = None,
        **options: Any,
    ) -> ServiceResult[SendOutcome]:
        """
        Send to a single receiver.

        Users may only address admins; nobody may address themselves.

        Error codes:
            RECEIVER_REQUIRED, RECEIVER_NOT_FOUND, SELF_TARGET,
            USER_TARGET_NOT_ADMIN, TYPE_DISABLED, VALIDATION_ERROR
        """
        return cls._send(
            requester,
            TargetingMode.SINGLE,
            title=title,
            message=message,
            type=type,
            target={"receiver_id": receiver_id, "receiver_email": receiver_email},
            **options,
        )

    @classmethod
    def send_to_all_users(
        cls,
        requester: User,
        title: str,
        message: str,
        type: str = NotificationType.ADMIN_BROADCAST,
        **options: Any,
    ) -> ServiceResult[SendOutcome]:
        """Broadcast to every active user with role "user" (admin only)."""
        return cls._send(
            requester, TargetingMode.ALL_USERS, title=title, message=message, type=type, **options
        )

    @classmethod
    def send_to_all_admins(
        cls,
        requester: User,
        title: str,
        message: str,
        type: str = NotificationType.USER_MESSAGE,
        **options: Any,
    ) -> ServiceResult[SendOutcome]:
        """Send to every active admin; the sender never receives their own send."""
        return cls._send(
            requester, TargetingMode.ALL_ADMINS, title=title, message=message, type=type, **options
        )

    @classmethod
    def send_to_category(
        cls,
        requester: User,
        category: str,
        title: str,
        message: str,
        type: str = NotificationType.CATEGORY_ALERT,
        **options: Any,
    ) -> ServiceResult[SendOutcome]:
        """Send to owners of at least one active habit in ``category`` (admin only)."""
        return cls._send(
            requester,
            TargetingMode.CATEGORY,
            title=title,
            message=message,
            type=type,
            category=category,
            target={"category": category},
            **options,
        )

    @classmethod
    def send_system(
        cls,
        requester: User,
        title: str,
        message: str,
        type: str = NotificationType.SYSTEM,
        **options: Any,
    ) -> ServiceResult[SendOutcome]:
        """System broadcast to every active user (admin only, audience must not be empty)."""
        return cls._send(
            requester, TargetingMode.SYSTEM, title=title, message=message, type=type, **options
        )

    @classmethod
    def send_habit_reminder(
        cls,
        requester: User,
        habit_name: str,
        message: str,
        habit_id: int | None = None,
        preferred_time: str | None = None,
        send_email: bool = False,
    ) -> ServiceResult[SendOutcome]:
        """
        Send a habit reminder to the caller.

        The record has a single receiver (the caller) and is pushed as a
        "habit-reminder" event with a compact payload.

        Args:
            requester: Caller, also the receiver
            habit_name: Habit name shown in the reminder
            message: Reminder text
            habit_id: Optional habit the reminder refers to (must be the caller's)
            preferred_time: Time of day; defaults to the habit's, then the
                caller's preferred time
            send_email: Also email the caller if they allow email

        Error codes:
            HABIT_NOT_FOUND, TYPE_DISABLED, REQUESTER_INACTIVE
        """
        habit = None
        if habit_id is not None:
            habit = Habit.objects.owned_by(requester).filter(pk=habit_id).first()
            if habit is None:
                return cls.handle_exception(
                    NotFoundError(
                        "Habit not found",
                        error_code="HABIT_NOT_FOUND",
                        details={"habit_id": habit_id},
                    ),
                    "habit reminder",
                )

        time_of_day = preferred_time or (
            habit.preferred_time if habit is not None else preferences.preferred_time(requester)
        )

        def reminder_payload(notification: Notification) -> dict[str, Any]:
            return {
                "id": notification.id,
                "habit_name": habit_name,
                "preferred_time": time_of_day,
                "message": message,
                "created_at": notification.created_at.isoformat(),
            }

        return cls._send(
            requester,
            TargetingMode.SELF,
            title=HABIT_REMINDER_TITLE,
            message=message,
            type=NotificationType.HABIT_REMINDER,
            related_habit=habit,
            send_email=send_email,
            event_name=RealtimeEvent.HABIT_REMINDER,
            payload_builder=reminder_payload,
        )

    # -------------------------------------------------------------------------
    # Shared send path
    # -------------------------------------------------------------------------

    @classmethod
    def _send(
        cls,
        requester: User,
        mode: str,
        *,
        title: str,
        message: str,
        type: str,
        target: dict[str, Any] | None = None,
        category: str | None = None,
        related_habit: Habit | None = None,
        action_url: str | None = None,
        send_email: bool = False,
        email_subject: str | None = None,
        email_html: str | None = None,
        event_name: str = RealtimeEvent.NEW_NOTIFICATION,
        payload_builder=None,
    ) -> ServiceResult[SendOutcome]:
        logger = cls.get_logger()

        try:
            cls._validate_content(type, title, message)
            selection = RecipientSelector.select(mode, requester, **(target or {}))
        except BaseApplicationError as exc:
            return cls.handle_exception(exc, f"send {mode} by user {getattr(requester, 'id', None)}")

        with cls.atomic():
            notification = Notification.objects.create_for_receivers(
                receivers=selection.receivers,
                sender=requester,
                type=type,
                title=title.strip(),
                message=message.strip(),
                category=category,
                related_habit=related_habit,
                action_url=action_url,
            )

        logger.info(
            f"Created notification {notification.id} type={type} mode={mode} "
            f"sender={requester.id} receivers={len(selection.receivers)}"
        )

        outcome = SendOutcome(notification=notification, selection=selection)
        dispatcher = cls.get_dispatcher()

        payload = payload_builder(notification) if payload_builder else None
        outcome.push_report = dispatcher.push(
            notification, selection.in_app_eligible, event_name=event_name, payload=payload
        )

        if send_email and selection.email_eligible:
            subject = email_subject or notification.title
            html = email_html or render_to_string(
                EMAIL_TEMPLATE, {"notification": notification}
            )
            if settings.NOTIFICATIONS_EMAIL_ASYNC:
                from notifications.tasks import deliver_notification_emails

                deliver_notification_emails.delay(
                    notification.id,
                    [user.id for user in selection.email_eligible],
                    subject,
                    html,
                )
                outcome.email_queued = True
                logger.info(
                    f"Queued {len(selection.email_eligible)} emails for notification {notification.id}"
                )
            else:
                outcome.email_results = dispatcher.send_emails(
                    selection.email_eligible, subject, html
                )

        return ServiceResult.success(outcome)

    @staticmethod
    def _validate_content(type: str, title: str, message: str) -> None:
        errors = {}
        if type not in NotificationType.values:
            errors["type"] = [f"Must be one of {', '.join(NotificationType.values)}."]
        if not title or not str(title).strip():
            errors["title"] = ["This field may not be blank."]
        if not message or not str(message).strip():
            errors["message"] = ["This field may not be blank."]
        if errors:
            raise ValidationError("Invalid notification", details=errors)

        if not NotificationSettings.load().allows(type):
            raise ValidationError(
                f"{type} notifications are disabled",
                error_code="TYPE_DISABLED",
                details={"type": type},
            )


class NotificationStateService(BaseService):
    """
    Per-receiver inbox state over shared records.

    Every mutation is one conditional UPDATE on the caller's receiver row,
    so repeated or concurrent calls converge on the same state.

    Methods:
        list_for: Visible records, newest first, capped
        unread_count: Visible unread records
        mark_read / mark_unread: Toggle the caller's read state
        mark_all_read: Mark every visible record read
        delete: Hide a record for the caller only (terminal)
    """

    @classmethod
    def list_for(cls, user: User, limit: int | None = None) -> list[Notification]:
        """Records visible to ``user``, newest first, never more than the page size."""
        page_size = settings.NOTIFICATIONS_PAGE_SIZE
        limit = min(limit or page_size, page_size)
        return list(Notification.objects.visible_to(user)[:limit])

    @classmethod
    def unread_count(cls, user: User) -> int:
        return Notification.objects.unread_for(user).count()

    @classmethod
    def mark_read(cls, notification_id: int, user: User) -> ServiceResult[Notification]:
        """
        Mark one record read for ``user``. Idempotent.

        Error codes:
            NOTIFICATION_NOT_FOUND: Not a receiver, or the record is hidden
        """
        receipt = cls._visible_receipt(notification_id, user)
        if receipt is None:
            return cls._not_found(notification_id)

        changed = receipt.mark_read()
        if changed:
            cls.get_logger().debug(f"User {user.id} read notification {notification_id}")
        return ServiceResult.success(Notification.objects.visible_to(user).get(pk=notification_id))

    @classmethod
    def mark_unread(cls, notification_id: int, user: User) -> ServiceResult[Notification]:
        """
        Mark one record unread for ``user``. Idempotent.

        Error codes:
            NOTIFICATION_NOT_FOUND: Not a receiver, or the record is hidden
        """
        receipt = cls._visible_receipt(notification_id, user)
        if receipt is None:
            return cls._not_found(notification_id)

        changed = receipt.mark_unread()
        if changed:
            cls.get_logger().debug(f"User {user.id} unread notification {notification_id}")
        return ServiceResult.success(Notification.objects.visible_to(user).get(pk=notification_id))

    @classmethod
    def mark_all_read(cls, user: User) -> ServiceResult[int]:
        """
        Mark every visible record read for ``user``.

        Returns:
            ServiceResult with the number of records that changed
        """
        count = NotificationRecipient.objects.for_user(user).mark_read()
        cls.get_logger().info(f"Marked {count} notifications as read for user {user.id}")
        return ServiceResult.success(count)

    @classmethod
    def delete(cls, notification_id: int, user: User) -> ServiceResult[None]:
        """
        Hide a record for ``user`` only. Other receivers are unaffected.

        Hiding an already hidden record succeeds without changes.

        Error codes:
            NOTIFICATION_NOT_FOUND: ``user`` is not a receiver
        """
        receipt = NotificationRecipient.objects.for_user(user).filter(
            notification_id=notification_id
        )
        if not receipt.exists():
            return cls._not_found(notification_id)

        if receipt.hide():
            cls.get_logger().info(f"User {user.id} hid notification {notification_id}")
        return ServiceResult.success(None)

    @staticmethod
    def _visible_receipt(notification_id: int, user: User):
        receipt = (
            NotificationRecipient.objects.for_user(user)
            .visible()
            .filter(notification_id=notification_id)
        )
        return receipt if receipt.exists() else None

    @classmethod
    def _not_found(cls, notification_id: int) -> ServiceResult:
        return ServiceResult.from_exception(
            NotFoundError(
                "Notification not found",
                error_code="NOTIFICATION_NOT_FOUND",
                details={"notification_id": notification_id},
            )
        )


class PreferenceService(BaseService):
    """
    Service for the caller's delivery preferences.

    The response flattens the user's preference document:
        {
            "notifications_enabled": bool,
            "in_app_notifications": bool,
            "email_reminders": bool,
            "theme": "light" | "dark",
            "preferred_notification_time": str,
            "resolved": {"in_app": bool, "email": bool, "preferred_time": str}
        }
    """

    # Serializer field -> key in User.preferences
    DOCUMENT_KEYS = {
        "in_app_notifications": preferences.IN_APP_KEY,
        "email_reminders": preferences.EMAIL_KEY,
        "theme": "theme",
    }

    @classmethod
    def get_preferences(cls, user: User) -> ServiceResult[dict]:
        prefs = user.preferences if isinstance(user.preferences, dict) else {}
        resolved = preferences.resolve(user)
        return ServiceResult.success(
            {
                "notifications_enabled": user.notifications_enabled,
                "in_app_notifications": prefs.get(preferences.IN_APP_KEY) is True,
                "email_reminders": prefs.get(preferences.EMAIL_KEY) is True,
                "theme": prefs.get("theme", "light"),
                "preferred_notification_time": user.preferred_notification_time,
                "resolved": {
                    "in_app": resolved.in_app_enabled,
                    "email": resolved.email_enabled,
                    "preferred_time": resolved.preferred_time,
                },
            }
        )

    @classmethod
    def update_preferences(cls, user: User, **changes: Any) -> ServiceResult[dict]:
        """
        Apply a partial update and return the new preferences.

        Args:
            user: Caller
            **changes: Any of notifications_enabled, in_app_notifications,
                email_reminders, theme, preferred_notification_time
        """
        if changes.get("preferred_notification_time") and (
            changes["preferred_notification_time"] not in PreferredTime.values
        ):
            return cls.handle_exception(
                ValidationError(
                    "Invalid preferred time",
                    details={"preferred_notification_time": [f"Must be one of {', '.join(PreferredTime.values)}."]},
                )
            )

        update_fields = []
        document = dict(user.preferences) if isinstance(user.preferences, dict) else {}

        for name, key in cls.DOCUMENT_KEYS.items():
            if name in changes:
                document[key] = changes[name]
        if document != user.preferences:
            user.preferences = document
            update_fields.append("preferences")

        if "notifications_enabled" in changes:
            user.notifications_enabled = changes["notifications_enabled"]
            update_fields.append("notifications_enabled")

        if "preferred_notification_time" in changes:
            user.preferred_notification_time = changes["preferred_notification_time"] or ""
            update_fields.append("preferred_notification_time")

        if update_fields:
            user.save(update_fields=[*update_fields, "updated_at"])
            cls.get_logger().info(f"Updated preferences {update_fields} for user {user.id}")

        return cls.get_preferences(user)


class NotificationSettingsService(BaseService):
    """Service for the system-wide notification toggles."""

    FIELDS = (
        "habit_reminder_notify",
        "streak_milestone_notify",
        "weekly_summary_notify",
        "monthly_summary_notify",
    )

    @classmethod
    def get_settings(cls) -> ServiceResult[NotificationSettings]:
        return ServiceResult.success(NotificationSettings.load())

    @classmethod
    def update_settings(cls, user: User, **changes: Any) -> ServiceResult[NotificationSettings]:
        """
        Update toggles (admins only).

        Error codes:
            ADMIN_REQUIRED
        """
        if user.role != UserRole.ADMIN:
            return cls.handle_exception(
                PermissionDeniedError(
                    "Only admins can update notification settings",
                    error_code="ADMIN_REQUIRED",
                )
            )

        instance = NotificationSettings.load()
        for name in cls.FIELDS:
            if name in changes:
                setattr(instance, name, changes[name])
        instance.updated_by = user
        instance.save()

        cls.get_logger().info(f"Notification settings updated by user {user.id}")
        return ServiceResult.success(instance)
