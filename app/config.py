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
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # Auth, database and storage all live in one Supabase project

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret used to verify Supabase access tokens"
    )

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

    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Image Upload Settings
    # -------------------------------------------------------------------------
    # Shared by the server-side validation and GiftApiClient's pre-flight check

    STORAGE_BUCKET: str = Field(
        default="gifts",
        description="Supabase Storage bucket holding gift images"
    )

    MAX_IMAGE_SIZE_MB: float = Field(
        default=4.5,
        gt=0,
        le=50,
        description="Maximum image upload size in MB"
    )

    ALLOWED_IMAGE_TYPES: str = Field(
        default="image/jpeg,image/jpg,image/png,image/gif,image/webp",
        description="Allowed image MIME types (comma-separated)"
    )

    REAP_ORPHANED_IMAGES: bool = Field(
        default=True,
        description="Delete stored images replaced by an update or left by a delete"
    )

    # -------------------------------------------------------------------------
    # Gift Content Rules
    # -------------------------------------------------------------------------

    TITLE_MIN_LENGTH: int = Field(
        default=3,
        ge=1,
        description="Minimum title length after trimming whitespace"
    )

    MESSAGE_MAX_LENGTH: int = Field(
        default=500,
        ge=1,
        description="Maximum length of the private message"
    )

    # -------------------------------------------------------------------------
    # Blur Placeholder Settings
    # -------------------------------------------------------------------------

    PLACEHOLDER_SIZE: int = Field(
        default=10,
        ge=1,
        le=64,
        description="Long-edge size in pixels of the generated blur placeholder"
    )

    PLACEHOLDER_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        gt=0,
        description="Timeout for fetching an image to build its placeholder"
    )

    # -------------------------------------------------------------------------
    # Client Settings
    # -------------------------------------------------------------------------

    GIFT_CACHE_TTL_SECONDS: float = Field(
        default=30.0,
        ge=0,
        description="How long GiftApiClient reuses a fetched gift list"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
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
    def allowed_image_types_list(self) -> list[str]:
        """
        Parse ALLOWED_IMAGE_TYPES string into a list.

        Example: "image/png, image/gif" -> ["image/png", "image/gif"]
        """
        return [t.strip().lower() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]

    @property
    def max_image_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return int(self.MAX_IMAGE_SIZE_MB * 1024 * 1024)

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
