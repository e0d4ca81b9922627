"""
Tests for the habit directory queries.

The category audience must count each owner once, and must ignore
soft-deleted habits as well as soft-deleted owners.
"""

import pytest

from authentication.tests.factories import UserFactory
from habits.models import Habit, HabitCategory
from habits.tests.factories import HabitFactory


@pytest.mark.django_db
class TestOwnerIdsForCategory:
    def test_three_active_owners_and_one_deleted_habit(self):
        """
        Three owners of active fitness habits plus one owner whose only
        fitness habit is deleted yields exactly the three active owners.
        """
        owners = [HabitFactory(category=HabitCategory.FITNESS).user for _ in range(3)]
        HabitFactory(category=HabitCategory.FITNESS, is_deleted=True)

        ids = Habit.objects.owner_ids_for_category(HabitCategory.FITNESS)

        assert ids == sorted(o.id for o in owners)

    def test_owner_with_several_habits_counted_once(self):
        user = UserFactory()
        HabitFactory.create_batch(3, user=user, category=HabitCategory.HEALTH)

        assert Habit.objects.owner_ids_for_category(HabitCategory.HEALTH) == [user.id]

    def test_deleted_owner_excluded(self):
        habit = HabitFactory(category=HabitCategory.LEARNING)
        habit.user.soft_delete()

        assert Habit.objects.owner_ids_for_category(HabitCategory.LEARNING) == []

    def test_other_categories_ignored(self):
        HabitFactory(category=HabitCategory.SOCIAL)

        assert Habit.objects.owner_ids_for_category(HabitCategory.FITNESS) == []


@pytest.mark.django_db
class TestHabitSoftDelete:
    def test_soft_delete_and_restore(self):
        habit = HabitFactory()

        habit.soft_delete()
        habit.refresh_from_db()
        assert habit.is_deleted is True
        assert habit.deleted_at is not None
        assert not Habit.objects.owned_by(habit.user).exists()

        habit.restore()
        habit.refresh_from_db()
        assert habit.is_deleted is False
        assert Habit.objects.owned_by(habit.user).get() == habit

    def test_queryset_delete_is_soft(self):
        habit = HabitFactory()

        count, _ = Habit.objects.filter(pk=habit.pk).delete()

        assert count == 1
        assert Habit.objects.deleted().filter(pk=habit.pk).exists()

    def test_hard_delete_removes_row(self):
        habit = HabitFactory()

        Habit.objects.filter(pk=habit.pk).hard_delete()

        assert not Habit.objects.filter(pk=habit.pk).exists()
