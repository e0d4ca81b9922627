"""
Notification preference resolution.

Decides, from a user snapshot alone, whether each delivery channel is allowed:

    Global gate (notifications_enabled) -> Channel opt-in (preferences[...])

    in-app  : notifications_enabled AND preferences["notifications"]
    email   : notifications_enabled AND preferences["email_reminders"]

Every function here is pure (no queries, no cache) and total: a missing
user, a missing attribute, a None or non-dict preference document, or a
non-boolean flag all resolve to "not allowed" instead of raising. Only the
literal value True enables a channel.

Usage:
    from notifications import preferences

    if preferences.should_send_in_app(user):
        transport.emit(...)

    in_app, email = preferences.partition(candidates)

    resolved = preferences.resolve(user)
    if resolved.blocked:
        logger.debug(f"User {user.id} blocked: {resolved.blocked_reason}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from authentication.models import User


DEFAULT_PREFERRED_TIME = "morning"

IN_APP_KEY = "notifications"
EMAIL_KEY = "email_reminders"

BLOCKED_GLOBAL = "global_disabled"
BLOCKED_CHANNELS = "channel_disabled"


@dataclass(frozen=True)
class ResolvedPreferences:
    """
    Resolved delivery preferences for one user.

    Attributes:
        in_app_enabled: Whether realtime push is allowed
        email_enabled: Whether email is allowed
        preferred_time: Reminder time of day ("morning" when unset)
        blocked: True if no channel is allowed
        blocked_reason: If blocked, why (global gate or every channel off)
    """

    in_app_enabled: bool
    email_enabled: bool
    preferred_time: str = DEFAULT_PREFERRED_TIME
    blocked: bool = False
    blocked_reason: str | None = None

    @property
    def any_enabled(self) -> bool:
        """True if at least one channel is enabled."""
        return self.in_app_enabled or self.email_enabled


def _channel_flag(user: User | None, key: str) -> bool:
    prefs = getattr(user, "preferences", None)
    if not isinstance(prefs, dict):
        return False
    return prefs.get(key) is True


def is_notifications_enabled(user: User | None) -> bool:
    """Global gate: true only when the user's notifications_enabled is True."""
    if user is None:
        return False
    return getattr(user, "notifications_enabled", None) is True


def should_send_in_app(user: User | None) -> bool:
    """Whether the user may receive realtime (in-app) pushes."""
    return is_notifications_enabled(user) and _channel_flag(user, IN_APP_KEY)


def should_send_email(user: User | None) -> bool:
    """Whether the user may receive notification emails."""
    return is_notifications_enabled(user) and _channel_flag(user, EMAIL_KEY)


def preferred_time(user: User | None) -> str:
    """The user's preferred reminder time, "morning" when unset."""
    value = getattr(user, "preferred_notification_time", None)
    if isinstance(value, str) and value:
        return value
    return DEFAULT_PREFERRED_TIME


def resolve(user: User | None) -> ResolvedPreferences:
    """
    Bundle every preference answer for one user.

    Args:
        user: User snapshot (may be None)

    Returns:
        ResolvedPreferences
    """
    in_app = should_send_in_app(user)
    email = should_send_email(user)
    reason = None
    if not is_notifications_enabled(user):
        reason = BLOCKED_GLOBAL
    elif not (in_app or email):
        reason = BLOCKED_CHANNELS
    return ResolvedPreferences(
        in_app_enabled=in_app,
        email_enabled=email,
        preferred_time=preferred_time(user),
        blocked=reason is not None,
        blocked_reason=reason,
    )


def partition(users: Iterable[User]) -> tuple[list[User], list[User]]:
    """
    Split candidates into (in-app eligible, email eligible), preserving order.

    A user may appear in both lists, or in neither.
    """
    in_app: list[User] = []
    email: list[User] = []
    for user in users:
        if should_send_in_app(user):
            in_app.append(user)
        if should_send_email(user):
            email.append(user)
    return in_app, email
