"""Runtime settings read from the environment (prefix ``QUIZSHARE_``) or a ``.env`` file."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from quizshare.constants.about import APP_NAME, APP_VERSION
from quizshare.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quizshare.constants.storage_constants import (
    DEFAULT_DATABASE_URL,
    DEFAULT_LOCAL_STORAGE_PATH,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="QUIZSHARE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Metadata
    APP_NAME: str = APP_NAME
    VERSION: str = APP_VERSION

    # Server Configuration
    HOST: str = DEFAULT_HOST
    PORT: int = DEFAULT_PORT
    PUBLIC_ORIGIN: Optional[str] = Field(
        default=None,
        description="Origin used in share links; the request base URL is used when unset.",
    )

    # Storage
    STORAGE_BACKEND: Literal["memory", "local", "sql"] = "memory"
    LOCAL_STORAGE_PATH: str = DEFAULT_LOCAL_STORAGE_PATH
    DATABASE_URL: str = DEFAULT_DATABASE_URL

    # Share codes
    QR_STRATEGY: Literal["scannable", "placeholder"] = "scannable"

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

    @field_validator("PUBLIC_ORIGIN")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()


def get_settings() -> Settings:
    return Settings()
