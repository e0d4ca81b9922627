"""
URL configuration for notifications API.

Routes:
    Inbox:
        /                     - List notifications (GET)
        /{id}/                - Hide notification (DELETE)
        /unread-count/        - Get unread count (GET)
        /{id}/read/           - Mark single as read (POST)
        /{id}/unread/         - Mark single as unread (POST)
        /read-all/            - Mark all as read (POST)

    Send:
        /send-to-user/        - Single receiver (POST)
        /send-to-all/         - All users (POST, admin)
        /send-to-admins/      - All admins except sender (POST)
        /send-to-category/    - Habit category owners (POST, admin)
        /send-system/         - System broadcast (POST, admin)
        /habit-reminder/      - Reminder to the caller (POST)

    Preferences and settings:
        /preferences/         - Caller's preferences (GET, PATCH)
        /settings/            - System toggles (GET, PUT admin)
"""

from rest_framework.routers import SimpleRouter

from notifications.views import NotificationViewSet

router = SimpleRouter()
router.register(r"", NotificationViewSet, basename="notification")

app_name = "notifications"
urlpatterns = router.urls
