"""Library configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from FORMVALIDATION_* environment variables."""

    # Short-circuit policy
    BREAK_ON_SYNC_ERROR: list[str] = ["error"]
    HALT_SYNC_PHASE_ON_BREAK: bool = False

    # Event bus
    EVENT_HISTORY_SIZE: int = 100

    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "info"

    model_config = SettingsConfigDict(
        env_prefix="FORMVALIDATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
