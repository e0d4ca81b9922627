"""
Factory Boy factories for authentication models.

Usage:
    from authentication.tests.factories import UserFactory, AdminFactory

    user = UserFactory()
    admin = AdminFactory()

    # Opted out of email only
    user = UserFactory(preferences={"notifications": True, "email_reminders": False})

    # Globally muted
    user = UserFactory(notifications_enabled=False)
"""

import factory

from authentication.models import User, UserRole


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for User model.

    Creates active users with role "user" and every notification channel
    enabled.

    Examples:
        user = UserFactory()
        deleted = UserFactory(is_deleted=True)
        evening = UserFactory(preferred_notification_time="evening")
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f"user{n}@example.com")
    role = UserRole.USER
    is_active = True
    is_staff = False
    notifications_enabled = True
    preferences = factory.LazyFunction(
        lambda: {"theme": "light", "notifications": True, "email_reminders": True}
    )

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", "TestPass123!")
        return model_class.objects.create_user(
            email=kwargs.pop("email"), password=password, **kwargs
        )


class AdminFactory(UserFactory):
    """Factory for users holding the admin role."""

    email = factory.Sequence(lambda n: f"admin{n}@example.com")
    role = UserRole.ADMIN
