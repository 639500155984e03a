"""
Configuration management for InventoryTracker.
Uses pydantic-settings for type-safe, centralized configuration.
"""

from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALUATION_METHOD_TAGS = ("FIFO", "LIFO", "weighted")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Uses pydantic-settings for validation and type safety.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'  # Allow extra fields in .env for flexibility
    )

    # Database
    database_url: str = "sqlite:///inventory_tracker.db"
    db_echo: bool = False

    # Valuation defaults
    default_valuation_method: str = "weighted"
    strict_valuation: bool = False

    # Low stock monitor
    low_stock_check_interval_minutes: int = 60
    alert_email: Optional[str] = None

    # Email / SMTP Configuration
    smtp_server: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    from_email: Optional[str] = None

    @field_validator('default_valuation_method')
    @classmethod
    def _check_method_tag(cls, value: str) -> str:
        if value not in VALUATION_METHOD_TAGS:
            raise ValueError(
                f"default_valuation_method must be one of {VALUATION_METHOD_TAGS}, got {value!r}"
            )
        return value

    @field_validator('low_stock_check_interval_minutes')
    @classmethod
    def _check_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("low_stock_check_interval_minutes must be positive")
        return value

    @property
    def email_from(self) -> Optional[str]:
        """Get the from email address, defaulting to smtp_username."""
        return self.from_email or self.smtp_username

    @property
    def is_email_configured(self) -> bool:
        """Check if email service is properly configured."""
        return all([
            self.smtp_username,
            self.smtp_password,
            self.email_from
        ])


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings(**overrides) -> Settings:
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings(**overrides)
    return _settings
