"""
Configuration management using Pydantic settings.
Handles the database connection string, pool sizing and server options.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import Optional, List
from functools import lru_cache


def normalize_database_url(url: Optional[str]) -> Optional[str]:
    """Ensure the async driver is used for PostgreSQL URLs."""
    if not url:
        return None

    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application configuration
    app_name: str = "Landlord Property Service API"
    service_name: str = "property-service"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # Database configuration
    database_url: Optional[str] = None
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_recycle: int = 3600
    db_pool_timeout: int = 30
    db_ssl: Optional[bool] = None

    # API configuration
    cors_origins: List[str] = ["*"]
    max_request_size: int = 1024 * 1024  # 1MB

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 3002

    @field_validator("database_url", mode="before")
    @classmethod
    def validate_database_url(cls, v):
        return normalize_database_url(v)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def database_configured(self) -> bool:
        return bool(self.database_url)

    @property
    def use_ssl(self) -> bool:
        """TLS to the store defaults to on in production only."""
        if self.db_ssl is not None:
            return self.db_ssl
        return self.is_production

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one instance of settings throughout the app lifecycle.
    """
    return Settings()


# Global settings instance
settings = get_settings()
