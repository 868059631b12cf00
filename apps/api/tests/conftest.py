"""
Shared test fixtures.
"""

import pytest

from hero_banners.core import rate_limit
from hero_banners.core.config import Settings

TEST_SECRET = "test-action-link-secret"


@pytest.fixture
def settings_factory():
    """Build settings isolated from the environment and any .env file."""

    def factory(**overrides) -> Settings:
        values = {
            "python_env": "test",
            "action_link_secret": TEST_SECRET,
            "app_base_url": "https://banners.example.org",
            "admin_email_recipients": "admin@example.org,shared@example.org",
            "town_email_recipients": "shared@example.org,clerk@example.org",
            "resend_api_key": "re_test_key",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return factory


@pytest.fixture
def settings(settings_factory):
    """Fully configured settings."""
    return settings_factory()


@pytest.fixture
def secret():
    return TEST_SECRET


@pytest.fixture(autouse=True)
def clear_rate_limits():
    """Each test starts with empty in-memory rate limit windows."""
    rate_limit._memory_store.clear()
    yield
    rate_limit._memory_store.clear()
