"""
Custom user manager and queryset for email-based authentication.

UserManager handles user creation with email as the primary identifier.
UserQuerySet is the user directory the notification engine reads: every
lookup used to address a notification goes through active(), so a
soft-deleted user is never a recipient.

Related files:
    - models.py: User model that uses this manager

Security:
    - Passwords are automatically hashed via set_password()
    - Email addresses are normalized (lowercase domain)
"""

from django.contrib.auth.models import BaseUserManager

from core.managers import SoftDeleteQuerySet


class UserQuerySet(SoftDeleteQuerySet):
    """
    Directory lookups over users.

    Usage:
        User.objects.with_role("admin")           # active admins
        User.objects.find_by_id(42)               # None if missing/deleted
        User.objects.find_by_email("a@b.co")      # case-insensitive
        User.objects.find_many([1, 2, 3])
    """

    def with_role(self, role):
        """Active users holding the given role."""
        return self.active().filter(role=role)

    def find_by_id(self, user_id):
        """Return the active user with this id, or None."""
        if user_id is None:
            return None
        return self.active().filter(pk=user_id).first()

    def find_by_email(self, email):
        """Return the active user with this email (case-insensitive), or None."""
        if not email:
            return None
        return self.active().filter(email__iexact=email.strip()).first()

    def find_many(self, user_ids):
        """Active users among the given ids, ordered by id."""
        return self.active().filter(pk__in=list(user_ids)).order_by("pk")


class UserManager(BaseUserManager.from_queryset(UserQuerySet)):
    """
    Custom manager for User model with email-based authentication.

    Usage:
        # Create a regular user
        user = User.objects.create_user(
            email='user@example.com',
            password='securepassword'
        )

        # Create a superuser (role=admin)
        admin = User.objects.create_superuser(
            email='admin@example.com',
            password='adminpassword'
        )
    """

    def create_user(self, email, password=None, **extra_fields):
        """
        Create and save a regular user with the given email and password.

        Args:
            email: User's email address (required)
            password: User's password (optional; unusable password when omitted)
            **extra_fields: Additional fields to set on the user

        Returns:
            User: The created user instance

        Raises:
            ValueError: If email is not provided
        """
        if not email:
            raise ValueError("The Email field must be set")

        # Normalize email (lowercase the domain portion)
        email = self.normalize_email(email)

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)

        user = self.model(email=email, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """
        Create and save a superuser with the given email and password.

        Superusers are notification admins as well.

        Raises:
            ValueError: If is_staff or is_superuser is not True
        """
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", "admin")

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, password, **extra_fields)
