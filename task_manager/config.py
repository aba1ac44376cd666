"""Application settings loaded from environment variables (+ optional .env)."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the Task Manager API.

    Every field can be overridden with a ``TASK_MANAGER_``-prefixed
    environment variable, e.g. ``TASK_MANAGER_DATABASE_URL``.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASK_MANAGER_",
        env_file=".env",
        extra="ignore",
    )

    # Application
    app_name: str = "Task Manager API"
    app_version: str = "1.0.0"
    environment: str = "development"  # development, production
    app_host: str = "127.0.0.1"
    app_port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None
    configure_logging: bool = True  # set False when the host process owns logging

    # Database
    database_url: str = "sqlite:///./task_manager.db"
    database_echo: bool = False

    # HTTP
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = ["http://localhost:3000"]


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
