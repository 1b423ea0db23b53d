"""
Pytest configuration and global fixtures.

Defines common fixtures and settings for the entire test suite.
"""

import os

import django
from django.conf import settings

# Configure Django settings before any Django imports
if not settings.configured:
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.test")
    django.setup()

# Now safe to import Django and DRF components
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from django.contrib.auth import get_user_model  # noqa: E402
from faker import Faker  # noqa: E402
from rest_framework.test import APIClient  # noqa: E402

User = get_user_model()
fake = Faker()

USER_PASSWORD = "testpass123"


@pytest.fixture
def make_user() -> Any:
    """Factory for users with a known password."""

    def _make_user(**kwargs: Any) -> Any:
        kwargs.setdefault("email", fake.unique.email())
        kwargs.setdefault("name", fake.name())
        kwargs.setdefault("password", USER_PASSWORD)
        return User.objects.create_user(**kwargs)

    return _make_user


@pytest.fixture
def user(make_user: Any) -> Any:
    """Create a test user."""
    return make_user(email="test@example.com", name="Test User")


@pytest.fixture
def other_user(make_user: Any) -> Any:
    """A second user who owns nothing the first user created."""
    return make_user(email="other@example.com", name="Other User")


@pytest.fixture
def api_client() -> APIClient:
    """DRF API test client."""
    return APIClient()


@pytest.fixture
def authenticated_api_client(api_client: APIClient, user: Any) -> APIClient:
    """Authenticated DRF API test client."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture(autouse=True)
def enable_db_access_for_all_tests(db: Any) -> None:
    """Enable database access for all tests by default."""
    pass
