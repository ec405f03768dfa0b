"""Configuration settings for the Qayd client."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class FlatSettings(BaseSettings):
    """Flat settings read from environment variables and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Qayd API
    api_url: str = Field(
        default="http://localhost:3000/api", validation_alias="QAYD_API_URL"
    )
    email: str | None = Field(default=None, validation_alias="QAYD_EMAIL")
    password: SecretStr | None = Field(default=None, validation_alias="QAYD_PASSWORD")
    timeout: float = Field(default=30.0, validation_alias="QAYD_TIMEOUT")
    max_retries: int = Field(default=3, validation_alias="QAYD_MAX_RETRIES")

    # Presentation
    locale: Literal["en", "ar"] = Field(default="en", validation_alias="QAYD_LOCALE")
    currency: str = Field(default="QAR", validation_alias="QAYD_CURRENCY")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", validation_alias="LOG_FORMAT"
    )


@lru_cache
def get_settings() -> FlatSettings:
    """Get cached settings instance."""
    return FlatSettings()
