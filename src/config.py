"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Gatekeeper"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "test", "production"] = "production"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    api_prefix: str = "/api/users"

    # Database
    database_path: str = "./data/gatekeeper.db"

    # Session tokens
    jwt_key: SecretStr | None = None  # Required at startup
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int | None = None  # None = tokens never expire
    session_cookie_name: str = "session"

    # Password hashing
    bcrypt_rounds: int = 12

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Tracing
    tracing_enabled: bool = False
    otlp_endpoint: str | None = None
    trace_console_export: bool = False
    trace_sample_rate: float = 1.0

    @property
    def secure_cookies(self) -> bool:
        """Whether the session cookie requires a secure transport."""
        return self.environment not in ("development", "test")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
