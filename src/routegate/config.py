"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import BaseModel, Field, RedisDsn, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from routegate.core.constants import (
    DEFAULT_KEY_PREFIX,
    DEFAULT_REDIS_MAX_CONNECTIONS,
    DEFAULT_STORE_TIMEOUT_SECONDS,
    FailMode,
)


class RouteLimitConfig(BaseModel):
    """One entry of the static route limit list.

    Bounds are checked again when the entry becomes a RouteLimit; the
    constraints here reject bad values at startup with a clear message.
    """

    route: str = Field(min_length=1)
    threshold: int = Field(gt=0)
    window_seconds: int = Field(gt=0)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "routegate"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # API Documentation
    api_docs_base_url: str = "https://api.example.com"

    # Redis
    redis_url: RedisDsn = RedisDsn("redis://localhost:6379")
    redis_max_connections: int = DEFAULT_REDIS_MAX_CONNECTIONS

    # Rate Limiting
    rate_limit_prefix: str = DEFAULT_KEY_PREFIX
    rate_limit_store_timeout: float = Field(DEFAULT_STORE_TIMEOUT_SECONDS, gt=0)
    rate_limit_fail_mode: FailMode = FailMode.CLOSED
    # JSON list, e.g. [{"route": "/search", "threshold": 10, "window_seconds": 60}]
    rate_limit_routes: list[RouteLimitConfig] = []

    # Observability
    log_level: str = "INFO"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
