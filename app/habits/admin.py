"""Django admin configuration for habits."""

from django.contrib import admin

from habits.models import Habit


@admin.register(Habit)
class HabitAdmin(admin.ModelAdmin):
    list_display = ["name", "user", "category", "preferred_time", "is_deleted", "created_at"]
    list_filter = ["category", "preferred_time", "is_deleted"]
    search_fields = ["name", "user__email"]
    raw_id_fields = ["user"]
    readonly_fields = ["created_at", "updated_at", "deleted_at"]
