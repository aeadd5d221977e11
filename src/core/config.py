"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="wedding-hooks", alias="APP_NAME")
    app_env: str = Field(default="development", alias="APP_ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # API
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")

    # Database
    postgres_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")
    postgres_db: str = Field(default="wedding_hooks", alias="POSTGRES_DB")
    postgres_user: str = Field(default="wedding", alias="POSTGRES_USER")
    postgres_password: str = Field(default="wedding_password", alias="POSTGRES_PASSWORD")
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")

    @property
    def async_database_url(self) -> str:
        """Construct async database URL."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Webhook delivery
    webhook_timeout: float = Field(default=15.0, ge=10.0, le=30.0, alias="WEBHOOK_TIMEOUT")
    webhook_response_body_limit: int = Field(default=500, alias="WEBHOOK_RESPONSE_BODY_LIMIT")
    webhook_user_agent: str = Field(default="WeddingHooks-Webhook/1.0", alias="WEBHOOK_USER_AGENT")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
