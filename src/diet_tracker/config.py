"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_base_url: str | None = None
    openai_vision_model: str = "gpt-4.1-mini"
    openai_text_model: str = "gpt-4.1-nano"
    fallback_base_url: str = "http://localhost:8080"
    daily_quota_limit: int = 150
    primary_timeout_seconds: float = 10.0
    image_timeout_seconds: float = 30.0
    fallback_timeout_seconds: float = 15.0
    storage_backend: str = "file"
    storage_path: str = "diet_tracker_data.json"
    image_dir: str = "food_images"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    admin_token: str | None = None
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str) -> str:
    """Normalize the configured storage backend name."""
    cleaned = raw.strip().lower()
    if cleaned in {"", "file", "json", "local"}:
        return "file"
    if cleaned == "supabase":
        return "supabase"
    raise ValueError(f"Unknown storage backend: {raw}")
