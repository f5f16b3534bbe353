"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

STORAGE_BACKENDS = ("file", "memory", "supabase")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    fdc_api_key: str
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    fdc_timeout_seconds: float = 15
    storage_backend: str = "file"
    storage_dir: str = ".glucose_tracker"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    environment: str = _ENVIRONMENT
    debug: bool = False

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str | None) -> str:
    """Normalize the configured storage backend name."""
    if raw is None:
        return "file"
    cleaned = raw.strip().lower()
    if not cleaned:
        return "file"
    if cleaned not in STORAGE_BACKENDS:
        raise ValueError(f"Unknown storage backend: {raw}")
    return cleaned
