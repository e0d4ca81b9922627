"""
Celery configuration for the Django application.

Celery runs the optional asynchronous email leg of notification delivery
(see notifications.tasks). Real-time push is never queued; it happens in the
request that created the notification.

Tasks are auto-discovered from all installed Django apps. With
CELERY_TASK_ALWAYS_EAGER=True tasks run inline, which is how local
development without a broker works.

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("habit_notifications")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Celery will look for a tasks.py module in each installed app
app.autodiscover_tasks()
