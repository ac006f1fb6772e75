"""Application settings using Pydantic."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PROMPT_BRIEF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Model assistance
    use_model: bool = False
    # Caller-side timeout around the model call; None leaves it to the adapter
    normalizer_timeout_seconds: float | None = None

    # Logging
    log_level: str = "INFO"
    log_json: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
