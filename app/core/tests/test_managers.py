"""
Tests for SoftDeleteQuerySet.

These tests verify that:
- QuerySet.delete() soft deletes instead of removing rows
- hard_delete() removes rows
- restore(), deleted() and active() behave as filters / bulk updates
"""

import pytest

from habits.models import Habit
from habits.tests.factories import HabitFactory


@pytest.mark.django_db
class TestSoftDeleteQuerySet:
    def test_delete_is_soft(self):
        HabitFactory.create_batch(2)

        count, by_model = Habit.objects.all().delete()

        assert count == 2
        assert by_model == {"habits.Habit": 2}
        assert Habit.objects.count() == 2
        assert Habit.objects.active().count() == 0

    def test_delete_skips_already_deleted(self):
        habit = HabitFactory()
        habit.soft_delete()
        HabitFactory()

        count, _ = Habit.objects.all().delete()

        assert count == 1

    def test_hard_delete(self):
        HabitFactory.create_batch(2)

        Habit.objects.all().hard_delete()

        assert Habit.objects.count() == 0

    def test_restore(self):
        habits = HabitFactory.create_batch(2)
        Habit.objects.all().delete()

        restored = Habit.objects.filter(pk=habits[0].pk).restore()

        assert restored == 1
        assert list(Habit.objects.active()) == [habits[0]]

    def test_deleted_and_active_partition(self):
        kept = HabitFactory()
        gone = HabitFactory()
        gone.soft_delete()

        assert list(Habit.objects.active()) == [kept]
        assert list(Habit.objects.deleted()) == [gone]
