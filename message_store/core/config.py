"""
Application configuration using 12-factor environment variables.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CorsPolicy(BaseModel):
    """CORS policy applied to every route."""

    origin: List[str] = Field(default_factory=lambda: ["*"])
    methods: List[str] = Field(
        default_factory=lambda: ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"]
    )
    headers: List[str] = Field(default_factory=lambda: ["*"])
    credentials: bool = Field(default=False)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Message Store Service")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(default="sqlite:///./data/messages.db")

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")  # json or text
    access_log: bool = Field(default=True)

    # HTTP hardening
    security_headers: bool = Field(default=True)
    cors: Optional[CorsPolicy] = Field(default=None, description="Optional CORS policy; permissive when unset")

    @property
    def cors_policy(self) -> CorsPolicy:
        """Configured CORS policy, or the permissive built-in one."""
        return self.cors or CorsPolicy()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
