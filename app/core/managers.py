"""
Custom QuerySet classes for soft-deletable models.

Manager vs QuerySet:
    - QuerySet: Defines chainable methods (filter, exclude, etc.)
    - Manager: Attaches QuerySet to model, defines table-level operations

Usage:
    from core.managers import SoftDeleteQuerySet

    class HabitQuerySet(SoftDeleteQuerySet):
        def in_category(self, category):
            return self.active().filter(category=category)

    class Habit(SoftDeleteMixin, BaseModel):
        objects = HabitQuerySet.as_manager()

    Habit.objects.active()          # Only non-deleted habits
    Habit.objects.deleted()         # Only deleted habits
    Habit.objects.filter(...).delete()   # Soft delete
    Habit.objects.filter(...).hard_delete()

Note:
    Managers built on SoftDeleteQuerySet do not hide deleted rows by
    default. Directory lookups (user by id/email, category owners) filter
    explicitly with active() so admin and auth code can still see every row.

Related:
    - core.model_mixins.SoftDeleteMixin: Model mixin for soft delete fields
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone


class SoftDeleteQuerySet(models.QuerySet):
    """
    QuerySet that provides soft delete operations.

    Methods:
        delete(): Soft delete (marks is_deleted=True)
        hard_delete(): Permanent delete
        restore(): Restore soft-deleted records
        deleted(): Filter to only deleted records
        active(): Filter to only active records
    """

    def delete(self) -> tuple[int, dict[str, int]]:
        """
        Soft delete all objects in queryset.

        Marks all matching records as deleted without removing from database.
        Sets is_deleted=True and deleted_at=now().

        Returns:
            Tuple of (count, {model_name: count}) matching Django's delete()
        """
        count = self.filter(is_deleted=False).update(
            is_deleted=True, deleted_at=timezone.now()
        )
        return count, {self.model._meta.label: count}

    def hard_delete(self) -> tuple[int, dict[str, int]]:
        """
        Permanently delete all objects in queryset.

        Warning:
            This cannot be undone. Consider soft_delete() first.
        """
        return super().delete()

    def restore(self) -> int:
        """
        Restore all soft-deleted objects in queryset.

        Returns:
            Number of restored records
        """
        return self.filter(is_deleted=True).update(is_deleted=False, deleted_at=None)

    def deleted(self) -> SoftDeleteQuerySet:
        """Filter to only soft-deleted records."""
        return self.filter(is_deleted=True)

    def active(self) -> SoftDeleteQuerySet:
        """Filter to only active (non-deleted) records."""
        return self.filter(is_deleted=False)
