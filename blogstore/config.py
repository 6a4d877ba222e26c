"""Application configuration via environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Backend (Supabase-compatible: GoTrue auth + PostgREST tables)
    supabase_url: str = "http://localhost:54321"
    supabase_anon_key: str = ""
    blogs_table: str = "blogs"

    # Listing
    page_size: int = 10

    # HTTP client policy (the stores themselves enforce no timeouts)
    request_timeout: float = 15.0

    # Persisted session ("local storage" for the identity provider session)
    session_file: Path = Path.home() / ".blogstore" / "session.json"
    session_refresh_margin: int = 60  # seconds before expiry

    # Logging
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
