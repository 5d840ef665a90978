# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.REQUEST_TIMEOUT_MS)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
#
# Settings are read once at process start and never reloaded.
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Nothing is required - every value has a default suitable for
    local development.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    SERVICE_NAME: str = Field(
        default="reviews-ratings-api",
        description="Service name reported by the health endpoint"
    )

    API_DOCS_PATH: str = Field(
        default="swagger.json",
        description="Path of the static OpenAPI document served at /swagger"
    )

    # -------------------------------------------------------------------------
    # Review Fetching
    # -------------------------------------------------------------------------

    MAX_REVIEWS_PER_APP: int = Field(
        default=200,
        ge=1,
        le=200,
        description="Default and maximum number of reviews returned per app"
    )

    REQUEST_TIMEOUT_MS: int = Field(
        default=10000,
        ge=1,
        description="Timeout for every outbound upstream request, in milliseconds"
    )

    REVIEW_SOURCE: Literal["app_store", "aso_market"] = Field(
        default="app_store",
        description="Upstream used for metadata and reviews"
    )

    REVIEW_STRATEGY: Literal["single_sort", "multi_sort"] = Field(
        default="multi_sort",
        description="App Store review strategy: one mostRecent feed, or all four sort orders merged"
    )

    ASO_MARKET_API_URL: str = Field(
        default="https://ios.reviews.aso.market",
        description="Base URL of the ASO Market reviews proxy"
    )

    DEFAULT_COUNTRY: str = Field(
        default="us",
        min_length=2,
        max_length=2,
        description="Storefront country used when the caller omits one"
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
    def request_timeout_seconds(self) -> float:
        """Convert REQUEST_TIMEOUT_MS to seconds for httpx."""
        return self.REQUEST_TIMEOUT_MS / 1000

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
