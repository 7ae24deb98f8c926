from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load project-root .env early so both pydantic-settings and any direct os.getenv access
# see consistent values, even if the process CWD is not the repo root.
_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_IN_TEST = (os.getenv("ENVIRONMENT") or "").lower() == "test" or bool(os.getenv("PYTEST_CURRENT_TEST"))
if _ENV_PATH.exists() and not _IN_TEST:
    load_dotenv(dotenv_path=_ENV_PATH, override=True)


class Settings(BaseSettings):
    app_name: str = Field(default="Jobboard")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    db_url: str | None = Field(default=None, validation_alias="DB_URL")

    # Server-side sessions: the cookie only carries an opaque token.
    session_cookie_name: str = Field(default="jobboard.sid", validation_alias="SESSION_COOKIE_NAME")
    session_ttl_seconds: int = Field(default=24 * 60 * 60, validation_alias="SESSION_TTL_SECONDS")
    session_cookie_secure: bool = Field(default=False, validation_alias="SESSION_COOKIE_SECURE")

    # OAuth providers. A provider is only registered when both values are set.
    oauth_callback_base_url: str = Field(default="http://127.0.0.1:3000", validation_alias="OAUTH_CALLBACK_BASE_URL")
    github_client_id: str | None = Field(default=None, validation_alias="GITHUB_CLIENT_ID")
    github_client_secret: str | None = Field(default=None, validation_alias="GITHUB_CLIENT_SECRET")
    google_client_id: str | None = Field(default=None, validation_alias="GOOGLE_CLIENT_ID")
    google_client_secret: str | None = Field(default=None, validation_alias="GOOGLE_CLIENT_SECRET")
    linkedin_client_id: str | None = Field(default=None, validation_alias="LINKEDIN_CLIENT_ID")
    linkedin_client_secret: str | None = Field(default=None, validation_alias="LINKEDIN_CLIENT_SECRET")
    xing_consumer_key: str | None = Field(default=None, validation_alias="XING_CONSUMER_KEY")
    xing_consumer_secret: str | None = Field(default=None, validation_alias="XING_CONSUMER_SECRET")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def build_sqlalchemy_db_url(settings: Settings) -> str:
    if settings.db_url:
        return settings.db_url

    # In development (and tests without DB_URL) default to a local sqlite file.
    if settings.environment.lower() in ("development", "test"):
        return "sqlite:///./dev.db"

    raise RuntimeError("DB_URL must be set outside development")


def provider_credentials(settings: Settings) -> dict[str, tuple[str, str]]:
    """Return ``{provider: (client_id, client_secret)}`` for every configured provider."""
    pairs = {
        "github": (settings.github_client_id, settings.github_client_secret),
        "google": (settings.google_client_id, settings.google_client_secret),
        "linkedin": (settings.linkedin_client_id, settings.linkedin_client_secret),
        "xing": (settings.xing_consumer_key, settings.xing_consumer_secret),
    }
    return {name: (key, secret) for name, (key, secret) in pairs.items() if key and secret}
