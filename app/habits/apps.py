"""Django app configuration for habits."""

from django.apps import AppConfig


class HabitsConfig(AppConfig):
    """Configuration for the habits app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "habits"
    verbose_name = "Habits"
