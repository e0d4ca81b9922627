"""
Habit model.

Only the fields the notification engine reads are modelled here: owner,
category, preferred time and soft delete state.

Models:
    Habit: A user's habit, soft-deletable

Enums:
    HabitCategory: Fixed set of categories used for category broadcasts
    HabitTime: Preferred time of day for the habit
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.managers import SoftDeleteQuerySet
from core.model_mixins import SoftDeleteMixin
from core.models import BaseModel


class HabitCategory(models.TextChoices):
    HEALTH = "health", "Health"
    FITNESS = "fitness", "Fitness"
    LEARNING = "learning", "Learning"
    PRODUCTIVITY = "productivity", "Productivity"
    MINDFULNESS = "mindfulness", "Mindfulness"
    SOCIAL = "social", "Social"
    OTHER = "other", "Other"


class HabitTime(models.TextChoices):
    ALL_DAY = "allDay", "All day"
    MORNING = "morning", "Morning"
    AFTERNOON = "afternoon", "Afternoon"
    EVENING = "evening", "Evening"


class HabitQuerySet(SoftDeleteQuerySet):
    """Directory queries over habits."""

    def owned_by(self, user) -> HabitQuerySet:
        """Active habits belonging to the given user."""
        return self.active().filter(user=user)

    def owner_ids_for_category(self, category: str) -> list[int]:
        """
        Ids of users owning at least one active habit in the category.

        Soft-deleted habits and soft-deleted owners are excluded. Each owner
        appears once regardless of how many matching habits they have.

        Args:
            category: HabitCategory value

        Returns:
            Sorted list of distinct user ids
        """
        return list(
            self.active()
            .filter(category=category, user__is_deleted=False)
            .order_by("user_id")
            .values_list("user_id", flat=True)
            .distinct()
        )


class Habit(SoftDeleteMixin, BaseModel):
    """
    A habit tracked by a user.

    Fields:
        user: Owner of the habit
        name: Display name, used in reminder text
        category: HabitCategory, used for category audiences
        preferred_time: HabitTime, copied into reminder payloads
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="habits",
        help_text="Owner of the habit",
    )
    name = models.CharField(
        max_length=200,
        help_text="Habit name",
    )
    category = models.CharField(
        max_length=20,
        choices=HabitCategory.choices,
        default=HabitCategory.OTHER,
        db_index=True,
        help_text="Habit category",
    )
    preferred_time = models.CharField(
        max_length=10,
        choices=HabitTime.choices,
        default=HabitTime.ALL_DAY,
        help_text="Preferred time of day for this habit",
    )

    objects = HabitQuerySet.as_manager()

    class Meta(BaseModel.Meta):
        verbose_name = "habit"
        verbose_name_plural = "habits"
        indexes = [
            models.Index(fields=["category", "is_deleted"], name="habit_category_deleted_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.category})"
