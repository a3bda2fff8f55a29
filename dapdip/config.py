"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone used for local times",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    cors_origins: str = Field(
        default="",
        description="Comma separated list of origins allowed by CORS",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending notification emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of notification emails",
        min_length=3,
    )
    push_gateway_url: str | None = Field(
        default=None,
        description="HTTP endpoint of the push gateway that fans out to devices",
    )
    push_gateway_key: str | None = Field(
        default=None,
        description="Server key sent to the push gateway in the Authorization header",
    )
    push_timeout_seconds: float = Field(default=5.0, gt=0)
    openai_api_key: str | None = Field(default=None)
    openai_base_url: str | None = Field(default=None)
    openai_model: str = Field(default="gpt-4.1-mini")
    openai_temperature: float = Field(default=0.3, ge=0, le=2)
    openai_max_output_tokens: int | None = Field(default=512)
    public_app_url: str = Field(
        default="http://localhost:3000",
        description="Base URL used to build absolute links inside notification emails",
    )
    user_cache_capacity: int = Field(
        default=1024,
        description="Maximum number of sender summaries kept in the process cache",
        gt=0,
    )
    user_cache_ttl_seconds: float = Field(
        default=300.0,
        description="Seconds before a cached sender summary is refreshed",
        gt=0,
    )
    relay_channel_prefix: str = Field(
        default="private-notification",
        description="Prefix of the per-user realtime channel name",
        min_length=1,
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    def cors_origin_list(self) -> list[str]:
        """Return the configured CORS origins without blanks or trailing slashes."""

        return [
            origin.strip().rstrip("/")
            for origin in self.cors_origins.split(",")
            if origin.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
