"""Application configuration helpers."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Self time in ms above which a table row is flagged.
SLOW_THRESHOLD = 0.1


class Settings(BaseSettings):
    """Runtime settings sourced from environment variables."""

    warm_up_time: int = Field(
        default=4000,
        ge=0,
        description="Milliseconds of execution discarded before recording starts",
    )
    max_recorded_time: int = Field(
        default=6000,
        gt=0,
        description="Milliseconds of execution aggregated into the report",
    )
    pre_roll: int = Field(
        default=100,
        ge=0,
        description="Delay in milliseconds between workspace readiness and warm-up",
    )
    slow_threshold: float = Field(
        default=SLOW_THRESHOLD,
        description="Self time (ms) above which a table row is flagged as slow",
    )
    default_project_id: str = Field(default="default_project")
    log_level: str = Field(default="INFO", description="Root logging level for the API process")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
