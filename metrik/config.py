from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from metrik.models.enums import SamplingInterval


class Settings(BaseSettings):
    """Engine settings loaded from environment variables or .env file."""

    DEFAULT_SAMPLING_INTERVAL: SamplingInterval = SamplingInterval.fortnightly
    MAX_DETAIL_PERIODS: int = 120

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


settings = Settings()
