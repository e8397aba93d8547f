"""
Application settings for Taskboard.

Values are read from the environment (or a local ``.env`` file) once and
cached; call ``get_settings()`` instead of instantiating ``Settings``.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./taskboard.db"

    # Logging / debugging
    debug: bool = False
    log_level: str | None = None
    log_json: bool = False

    # HTTP
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    default_page_limit: int = 10

    # Credentials
    jwt_secret_key: str = "dev-insecure-secret-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 120


@lru_cache
def get_settings() -> Settings:
    return Settings()
