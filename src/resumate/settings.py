from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from dotenv import dotenv_values
from pydantic_settings import BaseSettings, SettingsConfigDict

# Conventional unprefixed variables honoured alongside RESUMATE_*.
_PLAIN_ENV_KEYS = {
    "OPENAI_API_KEY": "openai_api_key",
    "DATABASE_URL": "sql_db_url",
    "SESSION_SECRET": "session_secret",
    "PORT": "port",
}


def _plain_env_settings_source() -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    env: Dict[str, Any] = {}
    env.update(dotenv_values(".env"))
    env.update(os.environ)

    for env_key, field in _PLAIN_ENV_KEYS.items():
        if env.get(env_key):
            data[field] = env[env_key]
    return data


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RESUMATE_", env_file=".env", extra="ignore")

    sql_db_url: str = "sqlite:///data/resumate.db"

    openai_api_key: str | None = None
    job_model: str = "gpt-4o-mini"
    resume_model: str = "gpt-4-turbo-preview"
    cover_letter_model: str = "gpt-3.5-turbo"
    llm_timeout_s: float = 600.0

    session_secret: str = "change-me"
    session_algorithm: str = "HS256"
    session_cookie_name: str = "session_token"

    fetch_timeout_s: float = 15.0

    pdf_format: str = "A4"
    resume_margin: str = "1cm"
    cover_letter_margin: str = "2cm"

    default_page_size: int = 10
    max_page_size: int = 100

    cors_origins: str = "*"

    log_level: str = "INFO"
    log_json: bool = False

    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def settings_customise_sources(
        cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            _plain_env_settings_source,
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
