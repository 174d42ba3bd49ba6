"""Configuration management for the application."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = Field(default="sqlite:///./notes.db")

    # Redis (shared one-time-code store and Celery broker)
    redis_url: str = Field(default="redis://localhost:6379/0")

    # JWT
    jwt_secret: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_expiration_minutes: int = Field(default=10080)  # 7 days

    # One-time codes for password reset
    otp_backend: Literal["memory", "redis"] = Field(default="memory")
    otp_ttl_minutes: int = Field(default=10, ge=1)
    otp_max_attempts: int = Field(default=3, ge=1)
    otp_sweep_interval_seconds: int = Field(default=300, ge=0)

    # Email (SMTP)
    smtp_host: str | None = Field(default=None)
    smtp_port: int = Field(default=587)
    smtp_username: str | None = Field(default=None)
    smtp_password: str | None = Field(default=None)
    smtp_use_tls: bool = Field(default=True)
    email_from: str = Field(default="no-reply@notes.local")

    # API
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
    )
    log_level: str = Field(default="INFO")
    environment: str = Field(default="development")

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.environment == "production":
            if self.jwt_secret == "change-me-in-production":  # noqa: S105
                raise ValueError("JWT_SECRET must be changed in production")
            if self.otp_backend != "redis":
                raise ValueError("OTP_BACKEND must be 'redis' in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def smtp_configured(self) -> bool:
        return bool(self.smtp_host)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
