"""Library configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Library settings loaded from environment variables.

    Every field can be overridden with a ``MIXED_COLLECTION_`` prefixed
    environment variable or a ``.env`` file.
    """

    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "info"

    # Collection defaults
    DEFAULT_NAME_KEY: str = "type"
    NAME_KEY_MISSING_INVALID: bool = False
    FILTER_MISSING_INVALID: bool = False
    IS_REQUIRED: bool = False

    # Required-empty message
    TRANSLATOR_TEXT_DOMAIN: str = "default"

    model_config = SettingsConfigDict(
        env_prefix="MIXED_COLLECTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
