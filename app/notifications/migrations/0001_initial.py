import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("habits", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, help_text="Timestamp when this record was created")),
                ("updated_at", models.DateTimeField(auto_now=True, help_text="Timestamp when this record was last modified")),
                ("type", models.CharField(choices=[("habit_reminder", "Habit reminder"), ("streak_milestone", "Streak milestone"), ("achievement", "Achievement"), ("system", "System"), ("user", "User"), ("admin_broadcast", "Admin broadcast"), ("category_alert", "Category alert"), ("user_message", "User message")], db_index=True, help_text="Kind of notification", max_length=32)),
                ("title", models.CharField(help_text="Notification title", max_length=500)),
                ("message", models.TextField(help_text="Notification body")),
                ("category", models.CharField(blank=True, choices=[("health", "Health"), ("fitness", "Fitness"), ("learning", "Learning"), ("productivity", "Productivity"), ("mindfulness", "Mindfulness"), ("social", "Social"), ("other", "Other")], default="", help_text="Habit category the notification targeted (category alerts)", max_length=20)),
                ("action_url", models.CharField(blank=True, default="", help_text="Client deep link opened from the notification", max_length=500)),
                ("related_habit", models.ForeignKey(blank=True, help_text="Habit this notification refers to (optional)", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="notifications", to="habits.habit")),
                ("sender", models.ForeignKey(blank=True, help_text="User who sent this notification (optional)", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="sent_notifications", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "notifications_notification",
                "ordering": ["-created_at", "-id"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="NotificationRecipient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("is_read", models.BooleanField(default=False)),
                ("read_at", models.DateTimeField(blank=True, null=True)),
                ("is_deleted", models.BooleanField(default=False)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("notification", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="recipients", to="notifications.notification")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="notification_receipts", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "notifications_recipient",
                "indexes": [models.Index(fields=["user", "is_deleted", "is_read"], name="notif_recipient_state_idx")],
                "constraints": [models.UniqueConstraint(fields=("notification", "user"), name="notif_recipient_unique")],
            },
        ),
        migrations.AddField(
            model_name="notification",
            name="receivers",
            field=models.ManyToManyField(help_text="Users this notification was addressed to", related_name="received_notifications", through="notifications.NotificationRecipient", to=settings.AUTH_USER_MODEL),
        ),
        migrations.AddIndex(
            model_name="notification",
            index=models.Index(fields=["type", "-created_at"], name="notif_type_created_idx"),
        ),
        migrations.CreateModel(
            name="NotificationSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("habit_reminder_notify", models.BooleanField(default=True)),
                ("streak_milestone_notify", models.BooleanField(default=True)),
                ("weekly_summary_notify", models.BooleanField(default=True)),
                ("monthly_summary_notify", models.BooleanField(default=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("updated_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "notification settings",
                "verbose_name_plural": "notification settings",
            },
        ),
    ]
