# toolroom/core/config.py
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Environment
    ENV: str = "dev"  # dev | prod
    DEBUG: bool = True

    # App
    PROJECT_NAME: str = "GAGE Toolroom"
    VERSION: str = "0.1.0"

    # Database
    DATABASE_URL: str = "sqlite:///./toolroom.db"
    DATABASE_ECHO: bool = False

    # Security
    SECRET_KEY: str
    SESSION_COOKIE: str = "toolroom_session"
    SESSION_HTTPS_ONLY: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Calculation history
    HISTORY_LIMIT: int = 100

    # AI gateway (OpenAI compatible chat completions)
    AI_GATEWAY_URL: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    AI_GATEWAY_API_KEY: str | None = None
    AI_CHAT_MODEL: str = "google/gemini-3-flash-preview"
    AI_QUIZ_MODEL: str = "google/gemini-2.5-flash"
    AI_FORECAST_MODEL: str = "google/gemini-2.5-flash"
    AI_TIMEOUT_SECONDS: float = 60.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
