# backend/birdsurvey/config.py
"""Runtime configuration.

Values come from environment variables prefixed with ``BIRDSURVEY_`` (or a
``.env`` file). ``get_settings`` is cached so validation runs once per
process.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="BIRDSURVEY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field("development", description="Environment label.")
    log_level: str = Field("INFO", description="Root logger level.")

    # 未設定なら <repo root>/data/app.db の SQLite を使う
    database_url: Optional[str] = Field(None, description="SQLAlchemy database URL.")

    jwt_secret: str = Field("dev-change-this-secret", description="Secret used to verify access tokens.")
    jwt_algorithm: str = Field("HS256")
    access_token_expire_minutes: int = Field(60, ge=1)

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    smtp_host: Optional[str] = Field(None, description="SMTP relay; e-mail is disabled when unset.")
    smtp_port: int = Field(587, ge=1, le=65535)
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_use_tls: bool = True
    notification_from_email: str = "noreply@localhost"
    notification_from_name: str = "Bird Survey"
    reviewer_email: Optional[str] = Field(None, description="Recipient of 'survey finished' notices.")

    interface_host: str = "0.0.0.0"
    interface_port: int = Field(8000, ge=1, le=65535)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
