"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    backend_url: str = "http://localhost:8000"
    api_prefix: str = "/api"
    session_token_path: Path = Path("~/.lumina/admin_token")
    request_timeout: float = 15.0
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def api_base_url(self) -> str:
        """Return the base URL every API operation is relative to."""
        return f"{self.backend_url.rstrip('/')}{self.api_prefix}"


def resolve_image_url(backend_url: str, url: str) -> str:
    """Resolve a possibly relative image URL against the backend origin."""
    if url.startswith("http"):
        return url
    return f"{backend_url.rstrip('/')}{url}"
