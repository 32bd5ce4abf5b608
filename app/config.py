# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.PORT)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# NODE_ENV value that switches on production-only behaviour (the keep-alive pinger)
PRODUCTION_MARKER = "production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Server
    # -------------------------------------------------------------------------

    PORT: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port the HTTP server listens on"
    )

    HOST: str = Field(
        default="0.0.0.0",
        description="Interface to bind the HTTP server to"
    )

    NODE_ENV: str = Field(
        default="development",
        description="Runtime environment name ('production' enables the keep-alive pinger)"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable verbose logging"
    )

    SERVICE_NAME: str = Field(
        default="Supply Chain API",
        description="Service name reported by the welcome and health endpoints"
    )

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Required - the server refuses to start without a reachable store

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Secret used to verify HS256 access tokens issued by Supabase Auth"
    )

    # -------------------------------------------------------------------------
    # Keep-Alive Pinger
    # -------------------------------------------------------------------------

    KEEPALIVE_URL: str = Field(
        default="https://crypto-project1.onrender.com/health",
        description="Public health URL of this service, pinged to keep the host awake"
    )

    KEEPALIVE_INTERVAL_SECONDS: float = Field(
        default=30.0,
        gt=0,
        description="Seconds between two self-pings"
    )

    KEEPALIVE_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound for a single self-ping request"
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
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def is_production(self) -> bool:
        """Check if the production marker is set."""
        return self.NODE_ENV == PRODUCTION_MARKER


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
