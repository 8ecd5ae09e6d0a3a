from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AwsSettings(BaseModel):
    model_config = SettingsConfigDict(extra="ignore")

    access_key_id: Optional[str] = Field(default=None)
    secret_access_key: Optional[str] = Field(default=None)
    region: str = Field(default="eu-west-3")
    s3_bucket: str = Field(default="mwplu-documents-dev")
    s3_endpoint_url: Optional[str] = Field(default=None)


_BASE_DIR = Path(__file__).resolve().parent.parent
_ROOT_ENV = _BASE_DIR / ".env"
_LOCAL_ENV = _BASE_DIR / ".env.local"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=tuple(str(path) for path in (_ROOT_ENV, _LOCAL_ENV)),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: str = Field(default="development", alias="APP_ENV")
    # Unset means the store is unconfigured and the service layer serves simulated data.
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    app_url: str = Field(default="http://localhost:5173", alias="APP_URL")
    api_url: str = Field(default="http://localhost:8000", alias="API_URL")

    auth_secret: str = Field(default="dev-auth-secret", alias="AUTH_SECRET")
    auth_token_ttl_hours: int = Field(default=72, alias="AUTH_TOKEN_TTL_HOURS")
    cookie_name: str = Field(default="mwplu_session", alias="SESSION_COOKIE_NAME")
    allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        alias="CORS_ALLOW_ORIGINS",
    )

    chat_webhook_url: str = Field(
        default="https://n8n.automationdfy.com/webhook/mwplu/chat", alias="CHAT_WEBHOOK_URL"
    )
    chat_timeout_seconds: float = Field(default=30.0, alias="CHAT_TIMEOUT_SECONDS")

    free_download_limit: int = Field(default=5, alias="FREE_DOWNLOAD_LIMIT")
    download_url_ttl_seconds: int = Field(default=300, alias="DOWNLOAD_URL_TTL_SECONDS")

    llm_model: str = Field(default="gpt-4o-mini", alias="LLM_MODEL")
    publish_interval_minutes: int = Field(default=5, alias="PUBLISH_INTERVAL_MINUTES")

    metrics_enabled: bool = Field(default=True, alias="METRICS_ENABLED")
    sentry_dsn: Optional[str] = Field(default=None, alias="SENTRY_DSN")
    sentry_traces_sample_rate: float = Field(default=0.0, alias="SENTRY_TRACES_SAMPLE_RATE")
    sentry_profiles_sample_rate: float = Field(default=0.0, alias="SENTRY_PROFILES_SAMPLE_RATE")

    aws: AwsSettings = Field(default_factory=AwsSettings)

    @model_validator(mode="after")
    def load_nested_env(self) -> "Settings":
        """Pick up flat AWS variables and comma-separated origins."""
        self.aws = AwsSettings(
            access_key_id=os.getenv("AWS_ACCESS_KEY_ID", self.aws.access_key_id),
            secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", self.aws.secret_access_key),
            region=os.getenv("AWS_REGION", self.aws.region),
            s3_bucket=os.getenv("S3_BUCKET", self.aws.s3_bucket),
            s3_endpoint_url=os.getenv("S3_ENDPOINT_URL", self.aws.s3_endpoint_url),
        )

        raw_origins: str | None
        if isinstance(self.allow_origins, str):
            raw_origins = self.allow_origins
        else:
            raw_origins = os.getenv("CORS_ALLOW_ORIGINS")

        if raw_origins:
            self.allow_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

        if self.database_url is not None and not self.database_url.strip():
            self.database_url = None

        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]


settings = get_settings()
