"""Configuration management for the Keep provider."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 30.0


class Settings(BaseSettings):
    """Provider settings loaded from KEEP_* environment variables.

    Values passed to the constructor take precedence over the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="KEEP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Keep API
    api_key: str = Field(default="")
    api_url: str = Field(default=DEFAULT_API_URL)
    timeout: float = Field(default=DEFAULT_TIMEOUT)  # seconds, whole request

    log_level: str = Field(default="INFO")

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)
