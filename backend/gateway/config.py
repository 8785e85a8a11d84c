"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache), one instance per process
    - DB_PORT and API_PORT keep the names the original deployment exports
    - store_timeout_seconds unset means store calls wait without bound

Design Decisions:
    - Defaults match docker-compose: the store is reachable at host `redis`
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gateway.core.domain_types import ErrorStatusMode


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, populate_by_name=True,
    )

    # Store
    redis_host: str = "redis"
    redis_port: int = Field(
        6379, validation_alias=AliasChoices("db_port", "redis_port"),
    )
    redis_password: str | None = None
    redis_db: int = 0
    store_timeout_seconds: float | None = None

    @field_validator("store_timeout_seconds")
    @classmethod
    def positive_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("store_timeout_seconds must be positive")
        return v

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8443
    tls_certfile: str = "server.crt"
    tls_keyfile: str = "server.key"
    cors_origins: list[str] = ["*"]
    cors_methods: list[str] = ["GET", "PUT", "POST", "DELETE"]
    cors_allow_credentials: bool = True
    error_status_mode: ErrorStatusMode = ErrorStatusMode.LEGACY

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
