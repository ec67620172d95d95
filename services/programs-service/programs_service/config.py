from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROGRAMS_DATABASE_URL: str = "sqlite+aiosqlite:///./programs.db"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    SERVICE_NAME: str = "programs-service"
    CORS_ORIGINS: str = "*"
    # Messages kept per user until the watch polls them
    WATCH_OUTBOX_SIZE: int = 100

    LOG_LEVEL: str = "INFO"
    # None picks the console renderer for local/dev/test environments
    LOG_JSON: bool | None = None
    SENTRY_DSN: str | None = None
    SENTRY_TRACES_SAMPLE_RATE: float = 0.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def is_local(self) -> bool:
        return self.ENVIRONMENT in {"local", "dev", "development", "test"}


@lru_cache()
def get_settings() -> Settings:
    return Settings()
