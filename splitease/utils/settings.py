from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


ENV_PATH = Path(__file__).resolve().parents[2] / "configs/.env"
SECRETS_ENV_PATH = Path(__file__).resolve().parents[2] / "configs/secrets/.env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=[str(SECRETS_ENV_PATH), str(ENV_PATH)],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # App
    APP_NAME: str = "splitease"
    LOG_LEVEL: str = "INFO"

    # Sessions
    DEFAULT_CURRENCY: str = "INR"
    SESSION_PIN_LENGTH: int = 6
    DEFAULT_SESSION_TITLE: str = "Untitled Session"

    # Export
    EXPORT_DIRECTORY: str = "exports"

    # HTTP
    CORS_ALLOW_ORIGINS: List[str] = ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
