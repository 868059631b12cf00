"""
Unit tests for application settings.
"""

from hero_banners.core.config import parse_email_list


class TestParseEmailList:
    """Tests for parse_email_list."""

    def test_empty_values(self):
        assert parse_email_list(None) == []
        assert parse_email_list("") == []

    def test_splits_and_strips(self):
        assert parse_email_list(" a@x.org, b@x.org ,,") == ["a@x.org", "b@x.org"]


class TestSettings:
    """Tests for derived settings properties."""

    def test_recipient_lists(self, settings):
        assert settings.admin_emails == ["admin@example.org", "shared@example.org"]
        assert settings.town_emails == ["shared@example.org", "clerk@example.org"]
        assert settings.admin_primary_email == "admin@example.org"

    def test_admin_primary_email_empty_without_admins(self, settings_factory):
        assert settings_factory(admin_email_recipients="").admin_primary_email == ""

    def test_test_emails_are_lowercased(self, settings_factory):
        settings = settings_factory(test_email_addresses="QA@Example.org, dev@example.org")
        assert settings.test_emails == ["qa@example.org", "dev@example.org"]

    def test_spaces_configured_requires_every_field(self, settings_factory):
        partial = settings_factory(do_spaces_bucket_name="bucket", do_spaces_region="nyc3")
        assert partial.spaces_configured is False

        full = settings_factory(
            do_spaces_bucket_name="bucket",
            do_spaces_endpoint="nyc3.digitaloceanspaces.com",
            do_spaces_region="nyc3",
            do_spaces_access_key="key",
            do_spaces_secret_key="secret",
        )
        assert full.spaces_configured is True

    def test_environment_flags(self, settings_factory):
        assert settings_factory(python_env="production").is_production is True
        assert settings_factory(python_env="development").is_development is True
