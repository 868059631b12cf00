"""
Application Configuration

Settings are loaded once from the environment (and an optional .env file)
and treated as immutable for the lifetime of the process.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_email_list(value: str | None) -> list[str]:
    """Split a comma-separated address list, dropping blanks."""
    if not value:
        return []
    return [email.strip() for email in value.split(",") if email.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    python_env: str = "development"
    cors_origins: str = "*"

    # Signed review links
    action_link_secret: str | None = None
    app_base_url: str | None = None

    # Recipients
    admin_email_recipients: str = ""
    town_email_recipients: str = ""
    test_email_addresses: str = ""
    skip_town_for_test_submissions: bool = False

    # Email (Resend)
    resend_api_key: str | None = None
    email_from: str = "Hometown Heroes BH <noreply@banners.bhmemorialpark.com>"

    # Redis (rate limiting)
    redis_url: str = "redis://localhost:6379/0"

    # DigitalOcean Spaces
    do_spaces_bucket_name: str | None = None
    do_spaces_endpoint: str | None = None
    do_spaces_region: str | None = None
    do_spaces_access_key: str | None = None
    do_spaces_secret_key: str | None = None

    @property
    def is_production(self) -> bool:
        return self.python_env == "production"

    @property
    def is_development(self) -> bool:
        return self.python_env == "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def admin_emails(self) -> list[str]:
        return parse_email_list(self.admin_email_recipients)

    @property
    def town_emails(self) -> list[str]:
        return parse_email_list(self.town_email_recipients)

    @property
    def test_emails(self) -> list[str]:
        return [email.lower() for email in parse_email_list(self.test_email_addresses)]

    @property
    def admin_primary_email(self) -> str:
        """First admin address, or an empty string when none is configured."""
        admins = self.admin_emails
        return admins[0] if admins else ""

    @property
    def spaces_configured(self) -> bool:
        return all(
            [
                self.do_spaces_bucket_name,
                self.do_spaces_endpoint,
                self.do_spaces_region,
                self.do_spaces_access_key,
                self.do_spaces_secret_key,
            ]
        )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


settings = get_settings()
