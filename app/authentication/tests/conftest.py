"""
Test configuration and fixtures for authentication tests.

Usage:
    def test_example(user, admin_user):
        assert User.objects.with_role("admin").count() == 1
"""

import pytest

from authentication.tests.factories import AdminFactory, UserFactory


@pytest.fixture
def user(db):
    """Create a regular user with every channel enabled."""
    return UserFactory()


@pytest.fixture
def admin_user(db):
    """Create a user with the admin role."""
    return AdminFactory()


@pytest.fixture
def deleted_user(db):
    """Create a soft-deleted regular user."""
    user = UserFactory()
    user.soft_delete()
    return user
