"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shopdesk.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "shopdesk.db"
    documents_subdir: str = "documents"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name

    @property
    def documents_dir(self) -> Path:
        return self.data_dir / self.documents_subdir


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]

    # Absolute URL prefix used when handing out document links
    public_base_url: str = "http://localhost:8000"

    # Server-sent events
    events_keepalive_seconds: float = 15.0


class PdfSettings(BaseSettings):
    """Invoice PDF layout configuration."""

    model_config = SettingsConfigDict(env_prefix="PDF_")

    shop_name: str = "ShopDesk"
    shop_address: str = ""
    shop_phone: str = ""
    footer_text: str = "Generated by ShopDesk"
    thank_you_text: str = "Thank you for your business!"
    letterhead_path: str = ""
    currency_label: str = "Rs."

    # TTF font for non-Latin text such as "₹" or Devanagari names; when
    # unset, characters outside Latin-1 print as "?"
    unicode_font_path: str = ""


class NotifySettings(BaseSettings):
    """WhatsApp gateway configuration."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_")

    enabled: bool = True
    gateway_url: str = "https://adrika.aknexus.in/api/send"
    instance_id: str = ""
    access_token: str = ""
    country_code: str = "91"
    message_template: str = "Hello {username}, here is your invoice."
    timeout: float = 10.0

    # Retry settings
    max_retries: int = 3
    retry_delay: float = 0.5
    retry_multiplier: float = 2.0


class PricingSettings(BaseSettings):
    """Money and calendar presentation."""

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    currency: str = "INR"
    timezone: str = "UTC"  # used for same-day filters and invoice dates


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "ShopDesk"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    pdf: PdfSettings = Field(default_factory=PdfSettings)
    notify: NotifySettings = Field(default_factory=NotifySettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None


def shop_timezone(name: str | None = None) -> ZoneInfo:
    """
    Resolve a timezone name, defaulting to ``PRICING_TIMEZONE``.

    Raises:
        ConfigurationError: If the name is not a known IANA zone.
    """
    name = name or get_settings().pricing.timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigurationError(
            f"Unknown timezone: {name}",
            code="INVALID_TIMEZONE",
            details={"timezone": name},
        ) from e
