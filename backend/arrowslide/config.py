"""
Arrow Slide - Configuration

Settings come from environment variables (and .env).
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application and engine settings."""

    # App
    APP_NAME: str = "Arrow Slide"
    DEBUG: bool = False
    API_PREFIX: str = "/api/v1"
    ENVIRONMENT: Literal["development", "production"] = "development"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Rate limiting (requests per minute per client)
    RATE_LIMIT_GENERATE: int = 30

    # Request guards
    MAX_GRID_SIZE: int = 40

    # Generator
    GENERATOR_MAX_ATTEMPTS: int = 50
    GENERATOR_SUPPLEMENTAL_PASSES: int = 3
    AXIS_IMBALANCE_LIMIT: int = 3
    VERIFIER_EXHAUSTIVE: bool = False

    # Level presets
    LEVEL_TILE_RATIO: float = 0.15

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"LOG_LEVEL must be a logging level name, got: {value}")
        return level

    @field_validator("GENERATOR_MAX_ATTEMPTS", "RATE_LIMIT_GENERATE", "MAX_GRID_SIZE")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"must be positive, got: {value}")
        return value

    @field_validator("GENERATOR_SUPPLEMENTAL_PASSES")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"must not be negative, got: {value}")
        return value

    @field_validator("LEVEL_TILE_RATIO")
    @classmethod
    def validate_ratio(cls, value: float) -> float:
        if not 0 < value <= 0.5:
            raise ValueError(f"LEVEL_TILE_RATIO must be in (0, 0.5], got: {value}")
        return value

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def generate_rate_limit(self) -> str:
        return f"{self.RATE_LIMIT_GENERATE}/minute"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


settings = get_settings()
