from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    GOOGLE_CLIENT_EMAIL: str | None = None
    GOOGLE_PRIVATE_KEY: str | None = None
    GOOGLE_CALENDAR_ID: str | None = None
    GOOGLE_CALENDAR_BASE_URL: str = "https://www.googleapis.com/calendar/v3"
    GOOGLE_TOKEN_URI: str = "https://oauth2.googleapis.com/token"

    STUDIO_TIMEZONE: str | None = None
    STUDIO_NAME: str = "Nombre del Estudio"
    STUDIO_ADDRESS: str = "Calle 000, Ciudad, País"
    STUDIO_EMAIL: str = "info@correo.com"
    STUDIO_PHONE: str = "+56 9 1234 5678"
    STUDIO_AVAILABLE_HOURS: list[int] = [17, 18, 19, 20, 21]
    STUDIO_WORKING_DAYS: list[int] = [1, 2, 3, 4, 5]

    TELEGRAM_ENABLED: bool = False
    TELEGRAM_BOT_TOKEN: str | None = None
    TELEGRAM_CHAT_ID: str | None = None
    TELEGRAM_SILENT: bool = False
    TELEGRAM_PARSE_MODE: str = "Markdown"
    TELEGRAM_API_BASE_URL: str = "https://api.telegram.org"

    CALENDAR_PROVIDER: str = "google"
    HTTP_TIMEOUT_SECONDS: float = 10.0
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.ENV.lower() in {"prod", "production"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
