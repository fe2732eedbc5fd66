"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["memory", "file", "supabase"] = "file"
    data_path: str = "calorie_tracker.json"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1-mini"
    recognition_timeout_seconds: float = 15.0
    session_ttl_hours: int = 24
    timezone: str = "UTC"
    password_iterations: int = 200_000
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
