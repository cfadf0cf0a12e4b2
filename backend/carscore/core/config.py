"""
Application configuration using Pydantic Settings.
Loads configuration from environment variables and .env file.

Only defaults live here. The scoring and cost formula constants are fixed
tables in the service modules and are not configurable.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "CarScore"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # Normalization assumptions (not sourced data)
    DEFAULT_SALES_VOLUME: int = 50000
    DEFAULT_ANNUAL_MILES: int = 12000

    # Fallback fuel prices used when the fuel-price source omits a tag
    FUEL_PRICE_REGULAR: float = 3.50  # $/gal
    FUEL_PRICE_PREMIUM: float = 4.50  # $/gal
    FUEL_PRICE_DIESEL: float = 4.00  # $/gal
    FUEL_PRICE_ELECTRIC: float = 0.15  # $/kWh

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lower-case level names from the environment."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("DEFAULT_SALES_VOLUME", "DEFAULT_ANNUAL_MILES")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
