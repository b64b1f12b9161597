"""Shared fixtures for accounts app tests."""

import pytest
from django.contrib.auth import get_user_model

User = get_user_model()


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        email='Test@Example.com',
        name='Test User',
        password='testpass123',
    )
