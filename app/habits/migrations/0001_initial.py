import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Habit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("is_deleted", models.BooleanField(db_index=True, default=False, help_text="Whether this record has been soft deleted")),
                ("deleted_at", models.DateTimeField(blank=True, help_text="Timestamp when this record was soft deleted", null=True)),
                ("name", models.CharField(help_text="Habit name", max_length=200)),
                ("category", models.CharField(choices=[("health", "Health"), ("fitness", "Fitness"), ("learning", "Learning"), ("productivity", "Productivity"), ("mindfulness", "Mindfulness"), ("social", "Social"), ("other", "Other")], db_index=True, default="other", help_text="Habit category", max_length=20)),
                ("preferred_time", models.CharField(choices=[("allDay", "All day"), ("morning", "Morning"), ("afternoon", "Afternoon"), ("evening", "Evening")], default="allDay", help_text="Preferred time of day for this habit", max_length=10)),
                ("user", models.ForeignKey(help_text="Owner of the habit", on_delete=django.db.models.deletion.CASCADE, related_name="habits", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "habit",
                "verbose_name_plural": "habits",
                "ordering": ["-created_at", "-id"],
                "abstract": False,
                "indexes": [models.Index(fields=["category", "is_deleted"], name="habit_category_deleted_idx")],
            },
        ),
    ]
