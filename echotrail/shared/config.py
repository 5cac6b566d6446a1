"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # Context cache settings
    weather_cache_ttl_minutes: int = Field(default=30, ge=0)
    location_cache_ttl_minutes: int = Field(default=60, ge=0)
    context_cache_size: int = Field(default=256, ge=1)
    activity_history_size: int = Field(default=10, ge=3)

    # Adaptation cache settings
    adaptation_cache_size: int = Field(default=100, ge=1)
    success_confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)

    # Confidence scoring (heuristic, tune per deployment)
    confidence_base: float = 0.5
    confidence_length_weight: float = 0.3
    confidence_strategy_weight: float = 0.4
    confidence_quality_weight: float = 0.3

    # Speech
    words_per_minute: int = Field(default=160, gt=0)

    # Seed for interaction point selection; None draws from system entropy
    random_seed: int | None = None

    # Open-Meteo (used when FF_USE_LIVE_WEATHER is on)
    open_meteo_url: str = "https://api.open-meteo.com/v1/forecast"
    weather_request_timeout: float = 10.0

    # Feature Flags (can also be set via FF_* env vars)
    ff_use_live_weather: bool = False
    ff_enable_ambient_sound_cues: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def confidence_weights(self) -> tuple[float, float, float]:
        """Get (length, strategy, quality) confidence weights."""
        return (
            self.confidence_length_weight,
            self.confidence_strategy_weight,
            self.confidence_quality_weight,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
