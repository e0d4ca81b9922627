"""
Recipient selection for notification sends.

Turns a targeting mode plus the requester into the final receiver set, then
splits that set into the channel-eligible subsets using
notifications.preferences. The selector never writes: it raises
core.exceptions errors before anything is persisted.

Targeting modes:
    single      the user looked up by receiver_id or receiver_email
                (requesters with role "user" may only target admins)
    all_users   every active user with role "user" (admin only)
    all_admins  every active admin except the requester
    category    every active owner of an active habit in the category
                (admin only)
    system      every active user with role "user" (admin only, must
                not be empty)
    self        the requester (habit reminders)

Every candidate stays a receiver even when no channel is allowed for them,
so the record remains visible in their inbox.

Usage:
    from notifications.recipients import RecipientSelector, TargetingMode

    selection = RecipientSelector.select(
        TargetingMode.CATEGORY, requester=admin, category="fitness"
    )
    selection.receivers          # everyone who gets the record
    selection.in_app_eligible    # realtime push targets
    selection.email_eligible     # email targets
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.db import models

from authentication.models import User, UserRole
from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from habits.models import Habit, HabitCategory
from notifications import preferences

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


class TargetingMode(models.TextChoices):
    SINGLE = "single", "Single user"
    ALL_USERS = "all_users", "All users"
    ALL_ADMINS = "all_admins", "All admins"
    CATEGORY = "category", "Habit category"
    SYSTEM = "system", "System broadcast"
    SELF = "self", "Requester"


@dataclass
class RecipientSelection:
    """
    Result of recipient resolution.

    Attributes:
        mode: TargetingMode used
        receivers: Full candidate set, ordered by id
        in_app_eligible: Receivers allowed realtime push
        email_eligible: Receivers allowed email
    """

    mode: str
    receivers: list[User] = field(default_factory=list)
    in_app_eligible: list[User] = field(default_factory=list)
    email_eligible: list[User] = field(default_factory=list)

    @property
    def receiver_ids(self) -> list[int]:
        return [user.id for user in self.receivers]

    @classmethod
    def from_candidates(cls, mode: str, candidates) -> RecipientSelection:
        receivers = sorted({user.id: user for user in candidates}.values(), key=lambda u: u.id)
        in_app, email = preferences.partition(receivers)
        return cls(
            mode=mode,
            receivers=receivers,
            in_app_eligible=in_app,
            email_eligible=email,
        )


class RecipientSelector:
    """
    Resolves receivers for each targeting mode.

    All methods are classmethods; the selector holds no state.
    """

    @classmethod
    def select(cls, mode: str, requester: User, **params: Any) -> RecipientSelection:
        """
        Dispatch to the resolver for ``mode``.

        Args:
            mode: TargetingMode value
            requester: Authenticated caller
            **params: Mode-specific parameters (receiver_id, receiver_email,
                category)

        Returns:
            RecipientSelection

        Raises:
            ValidationError: Unknown mode, missing fields, self target, or
                empty system audience
            PermissionDeniedError: Requester role not allowed for the mode
            NotFoundError: Single target missing or soft-deleted
        """
        cls._check_requester(requester)

        if mode == TargetingMode.SINGLE:
            selection = cls.for_single(
                requester,
                receiver_id=params.get("receiver_id"),
                receiver_email=params.get("receiver_email"),
            )
        elif mode == TargetingMode.ALL_USERS:
            selection = cls.for_all_users(requester)
        elif mode == TargetingMode.ALL_ADMINS:
            selection = cls.for_all_admins(requester)
        elif mode == TargetingMode.CATEGORY:
            selection = cls.for_category(requester, params.get("category"))
        elif mode == TargetingMode.SYSTEM:
            selection = cls.for_system(requester)
        elif mode == TargetingMode.SELF:
            selection = cls.for_self(requester)
        else:
            raise ValidationError(
                f"Unknown targeting mode: {mode}",
                error_code="INVALID_TARGETING_MODE",
                details={"mode": mode},
            )

        logger.debug(
            f"Selected {len(selection.receivers)} receivers for mode={mode} "
            f"(in_app={len(selection.in_app_eligible)}, "
            f"email={len(selection.email_eligible)}) requester={requester.id}"
        )
        return selection

    # -------------------------------------------------------------------------
    # Modes
    # -------------------------------------------------------------------------

    @classmethod
    def for_single(
        cls,
        requester: User,
        receiver_id: int | None = None,
        receiver_email: str | None = None,
    ) -> RecipientSelection:
        """Resolve a single receiver by id (preferred) or email."""
        if receiver_id in (None, "") and not receiver_email:
            raise ValidationError(
                "receiver_id or receiver_email is required",
                error_code="RECEIVER_REQUIRED",
                details={"receiver_id": ["This field is required."]},
            )

        if receiver_id not in (None, ""):
            target = User.objects.find_by_id(receiver_id)
            lookup = {"receiver_id": receiver_id}
        else:
            target = User.objects.find_by_email(receiver_email)
            lookup = {"receiver_email": receiver_email}

        if target is None:
            raise NotFoundError(
                "Receiver not found",
                error_code="RECEIVER_NOT_FOUND",
                details=lookup,
            )

        if target.id == requester.id:
            raise ValidationError(
                "Cannot send a notification to yourself",
                error_code="SELF_TARGET",
            )

        if requester.role == UserRole.USER and target.role != UserRole.ADMIN:
            raise PermissionDeniedError(
                "Users can only send notifications to admins",
                error_code="USER_TARGET_NOT_ADMIN",
            )

        return RecipientSelection.from_candidates(TargetingMode.SINGLE, [target])

    @classmethod
    def for_all_users(cls, requester: User) -> RecipientSelection:
        """Every active user with role "user"."""
        cls._require_admin(requester, "broadcast to all users")
        return RecipientSelection.from_candidates(
            TargetingMode.ALL_USERS, User.objects.with_role(UserRole.USER)
        )

    @classmethod
    def for_all_admins(cls, requester: User) -> RecipientSelection:
        """Every active admin, never including the requester."""
        candidates = User.objects.with_role(UserRole.ADMIN).exclude(pk=requester.pk)
        return RecipientSelection.from_candidates(TargetingMode.ALL_ADMINS, candidates)

    @classmethod
    def for_category(cls, requester: User, category: str | None) -> RecipientSelection:
        """Active owners of at least one active habit in ``category``."""
        cls._require_admin(requester, "send category notifications")
        if not category:
            raise ValidationError(
                "category is required",
                error_code="CATEGORY_REQUIRED",
                details={"category": ["This field is required."]},
            )
        if category not in HabitCategory.values:
            raise ValidationError(
                f"Unknown habit category: {category}",
                error_code="INVALID_CATEGORY",
                details={"category": [f"Must be one of {', '.join(HabitCategory.values)}."]},
            )

        owner_ids = Habit.objects.owner_ids_for_category(category)
        return RecipientSelection.from_candidates(
            TargetingMode.CATEGORY, User.objects.find_many(owner_ids)
        )

    @classmethod
    def for_system(cls, requester: User) -> RecipientSelection:
        """Every active user with role "user"; an empty audience is an error."""
        cls._require_admin(requester, "send system notifications")
        selection = RecipientSelection.from_candidates(
            TargetingMode.SYSTEM, User.objects.with_role(UserRole.USER)
        )
        if not selection.receivers:
            raise ValidationError(
                "No receivers for system notification",
                error_code="NO_RECEIVERS",
            )
        return selection

    @classmethod
    def for_self(cls, requester: User) -> RecipientSelection:
        """The requester alone (habit reminders)."""
        return RecipientSelection.from_candidates(TargetingMode.SELF, [requester])

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_requester(requester: User) -> None:
        if requester is None or getattr(requester, "is_deleted", False):
            raise PermissionDeniedError(
                "Account is not allowed to send notifications",
                error_code="REQUESTER_INACTIVE",
            )

    @staticmethod
    def _require_admin(requester: User, action: str) -> None:
        if requester.role != UserRole.ADMIN:
            raise PermissionDeniedError(
                f"Only admins can {action}",
                error_code="ADMIN_REQUIRED",
            )
