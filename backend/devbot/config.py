"""Application configuration using pydantic-settings."""

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

    log_level: str = "info"

    # Google AI
    google_api_key: str = ""
    title_model: str = "gemini-2.5-flash"
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)

    # Local persistence
    storage_backend: Literal["memory", "mongodb"] = "memory"
    storage_key: str = "devbot_chat_history"

    # MongoDB (only used when storage_backend == "mongodb")
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "devbot"


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
