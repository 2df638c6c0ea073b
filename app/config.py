"""Application configuration with environment separation."""
from functools import lru_cache
from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Environment
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = Field(default=True)

    # App
    app_name: str = "Portfolio Intelligence"
    api_v1_prefix: str = "/api/v1"

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./portfolio.db")

    # Auth - bearer tokens issued by the identity provider
    secret_key: str = Field(default="dev-secret-change-in-production")
    algorithm: str = "HS256"

    # Security - stored as comma-separated string in .env
    allowed_origins: str = Field(default="http://localhost:3000")
    rate_limit_enabled: bool = Field(default=True)
    rate_limit_per_minute: int = Field(default=60)

    # Intelligence API
    intelligence_enabled: bool = Field(default=False)
    intelligence_api_url: str = Field(default="http://intelligence-api:8001")
    intelligence_api_key: str = Field(default="")
    intelligence_timeout_seconds: float = Field(default=10.0)

    # Proxy cache TTLs (seconds)
    cache_ttl_dashboard: float = Field(default=120)
    cache_ttl_signals: float = Field(default=300)
    cache_ttl_articles: float = Field(default=60)
    cache_ttl_article_full: float = Field(default=60)
    intelligence_cache_maxsize: int = Field(default=10_000)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("debug", mode="before")
    @classmethod
    def set_debug(cls, v, info):
        """Disable debug in production."""
        if info.data.get("environment") == Environment.PRODUCTION:
            return False
        return v

    @property
    def allowed_origins_list(self) -> list[str]:
        """Get allowed origins as list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
