"""
Habits application.

Read-side directory of habits used for notification targeting:
category audiences ("everyone with a fitness habit") and ownership checks for
habit reminders. Habit CRUD and streak tracking are handled elsewhere.

Usage:
    from habits.models import Habit, HabitCategory

    owner_ids = Habit.objects.owner_ids_for_category(HabitCategory.FITNESS)
"""
