"""
Tests for notification models and querysets.

Covers:
- create_for_receivers (one record, one receiver row per unique user)
- visible_to / unread_for scoping and ordering
- Conditional state transitions on receiver rows
- NotificationSettings singleton and type gating
"""

import pytest
from django.db import IntegrityError

from notifications.models import (
    Notification,
    NotificationRecipient,
    NotificationSettings,
    NotificationType,
)
from notifications.tests.factories import NotificationFactory


@pytest.mark.django_db
class TestCreateForReceivers:
    def test_creates_one_record_with_receiver_rows(self, admin_user, user, other_user):
        notification = Notification.objects.create_for_receivers(
            receivers=[user, other_user],
            sender=admin_user,
            type=NotificationType.ADMIN_BROADCAST,
            title="Maintenance",
            message="Down at 02:00 UTC",
        )

        assert Notification.objects.count() == 1
        assert notification.receiver_ids == {user.id, other_user.id}
        assert notification.read_by == set()
        assert notification.deleted_by == set()
        assert notification.category == ""
        assert notification.action_url == ""

    def test_duplicate_receivers_collapse(self, admin_user, user):
        notification = Notification.objects.create_for_receivers(
            receivers=[user, user],
            sender=admin_user,
            type=NotificationType.USER_MESSAGE,
            title="Hi",
            message="Hello",
        )

        assert NotificationRecipient.objects.filter(notification=notification).count() == 1

    def test_empty_receivers_allowed(self, admin_user):
        notification = Notification.objects.create_for_receivers(
            receivers=[],
            sender=admin_user,
            type=NotificationType.USER_MESSAGE,
            title="Hi",
            message="Hello",
        )

        assert notification.receiver_ids == set()

    def test_receiver_row_is_unique(self, user):
        notification = NotificationFactory(receivers=[user])

        with pytest.raises(IntegrityError):
            NotificationRecipient.objects.create(notification=notification, user=user)


@pytest.mark.django_db
class TestVisibility:
    def test_visible_to_only_receivers(self, user, other_user):
        mine = NotificationFactory(receivers=[user])
        NotificationFactory(receivers=[other_user])

        assert list(Notification.objects.visible_to(user)) == [mine]

    def test_hidden_records_excluded(self, user, other_user):
        notification = NotificationFactory(receivers=[user, other_user])
        NotificationRecipient.objects.for_user(user).hide()

        assert not Notification.objects.visible_to(user).exists()
        assert Notification.objects.visible_to(other_user).count() == 1

    def test_newest_first(self, user):
        older = NotificationFactory(receivers=[user])
        newer = NotificationFactory(receivers=[user])

        assert list(Notification.objects.visible_to(user)) == [newer, older]

    def test_is_read_annotation_is_per_user(self, user, other_user):
        notification = NotificationFactory(receivers=[user, other_user])
        NotificationRecipient.objects.for_user(user).mark_read()

        assert Notification.objects.visible_to(user).get().is_read_by_user is True
        assert Notification.objects.visible_to(other_user).get().is_read_by_user is False
        assert notification.read_by == {user.id}

    def test_unread_for(self, user):
        read = NotificationFactory(receivers=[user])
        unread = NotificationFactory(receivers=[user])
        hidden = NotificationFactory(receivers=[user])
        NotificationRecipient.objects.filter(notification=read).mark_read()
        NotificationRecipient.objects.filter(notification=hidden).hide()

        assert list(Notification.objects.unread_for(user)) == [unread]


@pytest.mark.django_db
class TestRecipientTransitions:
    def test_mark_read_is_idempotent(self, user):
        NotificationFactory(receivers=[user])
        rows = NotificationRecipient.objects.for_user(user)

        assert rows.mark_read() == 1
        assert rows.mark_read() == 0
        assert rows.get().read_at is not None

    def test_mark_unread_clears_read_at(self, user):
        NotificationFactory(receivers=[user])
        rows = NotificationRecipient.objects.for_user(user)
        rows.mark_read()

        assert rows.mark_unread() == 1
        row = rows.get()
        assert row.is_read is False
        assert row.read_at is None

    def test_hidden_rows_ignore_read_transitions(self, user):
        NotificationFactory(receivers=[user])
        rows = NotificationRecipient.objects.for_user(user)
        rows.hide()

        assert rows.mark_read() == 0
        assert rows.mark_unread() == 0
        assert rows.hide() == 0


@pytest.mark.django_db
class TestNotificationSettings:
    def test_load_creates_defaults(self):
        settings = NotificationSettings.load()

        assert settings.pk == NotificationSettings.SINGLETON_PK
        assert settings.habit_reminder_notify is True
        assert NotificationSettings.objects.count() == 1

    def test_save_keeps_single_row(self):
        NotificationSettings(habit_reminder_notify=False).save()
        NotificationSettings(streak_milestone_notify=False).save()

        assert NotificationSettings.objects.count() == 1

    def test_save_invalidates_cache(self):
        settings = NotificationSettings.load()
        settings.habit_reminder_notify = False
        settings.save()

        assert NotificationSettings.load().habit_reminder_notify is False

    @pytest.mark.parametrize(
        "field,notification_type",
        [
            ("habit_reminder_notify", NotificationType.HABIT_REMINDER),
            ("streak_milestone_notify", NotificationType.STREAK_MILESTONE),
        ],
    )
    def test_allows_gated_types(self, field, notification_type):
        settings = NotificationSettings.load()
        assert settings.allows(notification_type) is True

        setattr(settings, field, False)
        assert settings.allows(notification_type) is False

    def test_other_types_always_allowed(self):
        settings = NotificationSettings(
            habit_reminder_notify=False, streak_milestone_notify=False
        )

        assert settings.allows(NotificationType.SYSTEM) is True
        assert settings.allows(NotificationType.ADMIN_BROADCAST) is True
