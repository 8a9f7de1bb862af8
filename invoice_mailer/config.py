"""
Centralized configuration using Pydantic Settings.

All environment variables are loaded and validated here.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from invoice_mailer.core.models import Source


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Accounts, processed in this order
    accounts: list[str] = ["PC", "ET", "PCP"]
    # JSON maps, e.g. STRIPE_KEYS='{"PC": "sk_live_...", "ET": "sk_live_..."}'
    stripe_keys: dict[str, str] = {}
    destinations: dict[str, str] = {}

    # Stripe
    stripe_api_base: str = "https://api.stripe.com"
    stripe_page_size: int = 10
    stripe_timeout_seconds: float = 30.0

    # Mailer (Gmail app password)
    admin_email: str = ""
    gmail_app_password: str = ""
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465

    # Downloads
    max_requests_per_second: int = 80
    download_max_attempts: int = 5
    download_timeout_seconds: float = 30.0
    download_workers: int = 1

    # Windows
    timezone: str = "UTC"
    scheduled_window_policy: str = "previous_month"  # or "trailing_month"

    # Scheduler (monthly cron) - disabled by default
    scheduler_enabled: bool = False
    scheduler_day: int = 1
    scheduler_hour: int = 6

    # Logging
    log_level: str = "INFO"
    json_logs: bool = True  # False for colored dev output

    @property
    def mailer_configured(self) -> bool:
        """Both mailer credentials are present."""
        return bool(self.admin_email and self.gmail_app_password)

    def sources(self) -> list[Source]:
        """Build one Source per configured account (credential may be empty)."""
        return [Source(key=key, credential=self.stripe_keys.get(key, "")) for key in self.accounts]


# Global settings instance
settings = Settings()
