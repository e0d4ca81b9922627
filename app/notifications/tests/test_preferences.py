"""
Tests for notification preference resolution.

The resolution functions are pure, so most tests use plain objects instead
of database users.
"""

from types import SimpleNamespace

import pytest

from notifications import preferences


def make_user(notifications_enabled=True, prefs=None, preferred_time="", **extra):
    if prefs is None:
        prefs = {"notifications": True, "email_reminders": True}
    return SimpleNamespace(
        id=extra.pop("id", 1),
        notifications_enabled=notifications_enabled,
        preferences=prefs,
        preferred_notification_time=preferred_time,
        **extra,
    )


class TestGlobalGate:
    def test_enabled_user(self):
        assert preferences.is_notifications_enabled(make_user()) is True

    def test_disabled_user_blocks_every_channel(self):
        user = make_user(notifications_enabled=False)

        assert preferences.should_send_in_app(user) is False
        assert preferences.should_send_email(user) is False

    def test_none_user(self):
        assert preferences.is_notifications_enabled(None) is False
        assert preferences.should_send_in_app(None) is False
        assert preferences.should_send_email(None) is False

    def test_non_boolean_gate_is_not_enabled(self):
        assert preferences.is_notifications_enabled(make_user(notifications_enabled="yes")) is False


class TestChannelFlags:
    def test_in_app_only(self):
        user = make_user(prefs={"notifications": True, "email_reminders": False})

        assert preferences.should_send_in_app(user) is True
        assert preferences.should_send_email(user) is False

    def test_email_only(self):
        user = make_user(prefs={"notifications": False, "email_reminders": True})

        assert preferences.should_send_in_app(user) is False
        assert preferences.should_send_email(user) is True

    @pytest.mark.parametrize("prefs", [None, {}, "notifications", []])
    def test_missing_or_malformed_document(self, prefs):
        user = make_user()
        user.preferences = prefs

        assert preferences.should_send_in_app(user) is False
        assert preferences.should_send_email(user) is False

    @pytest.mark.parametrize("value", [1, "true", "True", None])
    def test_only_literal_true_enables(self, value):
        user = make_user(prefs={"notifications": value, "email_reminders": value})

        assert preferences.should_send_in_app(user) is False
        assert preferences.should_send_email(user) is False

    def test_user_without_preferences_attribute(self):
        user = SimpleNamespace(notifications_enabled=True)

        assert preferences.should_send_in_app(user) is False


class TestPreferredTime:
    def test_defaults_to_morning(self):
        assert preferences.preferred_time(make_user()) == "morning"
        assert preferences.preferred_time(None) == "morning"

    def test_uses_user_value(self):
        assert preferences.preferred_time(make_user(preferred_time="evening")) == "evening"


class TestResolve:
    def test_everything_enabled(self):
        resolved = preferences.resolve(make_user(preferred_time="afternoon"))

        assert resolved.in_app_enabled is True
        assert resolved.email_enabled is True
        assert resolved.preferred_time == "afternoon"
        assert resolved.blocked is False
        assert resolved.blocked_reason is None
        assert resolved.any_enabled is True

    def test_global_gate_reason(self):
        resolved = preferences.resolve(make_user(notifications_enabled=False))

        assert resolved.blocked is True
        assert resolved.blocked_reason == preferences.BLOCKED_GLOBAL

    def test_all_channels_off_reason(self):
        resolved = preferences.resolve(
            make_user(prefs={"notifications": False, "email_reminders": False})
        )

        assert resolved.blocked is True
        assert resolved.blocked_reason == preferences.BLOCKED_CHANNELS


class TestPartition:
    def test_splits_and_preserves_order(self):
        both = make_user(id=1)
        in_app_only = make_user(id=2, prefs={"notifications": True})
        email_only = make_user(id=3, prefs={"email_reminders": True})
        muted = make_user(id=4, notifications_enabled=False)

        in_app, email = preferences.partition([both, in_app_only, email_only, muted])

        assert [u.id for u in in_app] == [1, 2]
        assert [u.id for u in email] == [1, 3]

    def test_empty(self):
        assert preferences.partition([]) == ([], [])
