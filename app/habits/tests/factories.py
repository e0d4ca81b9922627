"""
Factory Boy factories for habits.

Usage:
    from habits.tests.factories import HabitFactory

    habit = HabitFactory(category="fitness")
    habit = HabitFactory(user=user, is_deleted=True)
"""

import factory

from authentication.tests.factories import UserFactory
from habits.models import Habit, HabitCategory, HabitTime


class HabitFactory(factory.django.DjangoModelFactory):
    """Factory for Habit model."""

    class Meta:
        model = Habit

    user = factory.SubFactory(UserFactory)
    name = factory.Sequence(lambda n: f"Habit {n}")
    category = HabitCategory.OTHER
    preferred_time = HabitTime.MORNING
