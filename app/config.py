# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Settings load without raising so the process can start in a degraded mode.
# validate_settings() applies the startup policy: missing required values
# are fatal in development and logged in every other environment.
# =============================================================================

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


# Settings the API cannot serve real traffic without
REQUIRED_SETTINGS = (
    "SUPABASE_URL",
    "SUPABASE_ANON_KEY",
    "SUPABASE_JWT_SECRET",
    "STRIPE_SECRET_KEY",
    "STRIPE_PUBLISHABLE_KEY",
)


class ConfigurationError(Exception):
    """Raised when required settings are missing at startup."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            f"Missing required environment variables: {', '.join(missing)}"
        )


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings to:
    - Automatically load from .env file
    - Validate types and constraints
    - Provide sensible defaults for development

    All settings are accessed via get_settings() (or the global `settings`).
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------

    SUPABASE_URL: str | None = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str | None = Field(
        default=None,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str | None = Field(
        default=None,
        description="Supabase service_role key (bypasses RLS, needed for admin calls)"
    )

    SUPABASE_JWT_SECRET: str | None = Field(
        default=None,
        description="Legacy HS256 secret used to verify Supabase access tokens"
    )

    # -------------------------------------------------------------------------
    # Stripe Configuration
    # -------------------------------------------------------------------------

    STRIPE_SECRET_KEY: str | None = Field(
        default=None,
        description="Stripe secret key (sk_...)"
    )

    STRIPE_PUBLISHABLE_KEY: str | None = Field(
        default=None,
        description="Stripe publishable key (pk_...), handed to the web client"
    )

    # -------------------------------------------------------------------------
    # Mobile Money Providers
    # -------------------------------------------------------------------------

    MTN_MOBILE_MONEY_API_KEY: str | None = Field(default=None)
    MPESA_API_KEY: str | None = Field(default=None)
    AIRTEL_MONEY_API_KEY: str | None = Field(default=None)
    TIGO_PESA_API_KEY: str | None = Field(default=None)

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    BASE_URL: str = Field(
        default="http://localhost:3000",
        description="Public URL of the web app, used for payment return URLs"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def missing_required(self) -> list[str]:
        """Names of required settings that are unset."""
        return [name for name in REQUIRED_SETTINGS if not getattr(self, name)]

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)

    @property
    def stripe_configured(self) -> bool:
        return bool(self.STRIPE_SECRET_KEY)

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


def validate_settings(config: Settings) -> bool:
    """
    Check required settings at startup.

    Args:
        config: The settings instance to check

    Returns:
        True if every required setting is present and well-formed,
        False if the app should run in degraded mode

    Raises:
        ConfigurationError: If required settings are missing in development
    """
    missing = config.missing_required

    if missing:
        logger.error(f"Missing required environment variables: {', '.join(missing)}")
        if config.is_development:
            raise ConfigurationError(missing)
        return False

    if config.SUPABASE_URL and "supabase.co" not in config.SUPABASE_URL:
        logger.error("Invalid Supabase URL format")
        return False

    return True


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
