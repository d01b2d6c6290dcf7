"""Application configuration managed via environment variables."""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Life Coach Backend"
    debug: bool = False
    log_level: str = "INFO"
    database_url: str = "postgresql+psycopg2://lifecoach@localhost:5432/lifecoach"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "lifecoach"
    opik_workspace: str | None = None
    opik_host: str | None = None
    scheduler_enabled: bool = False
    scheduler_timezone: str = "UTC"
    nudge_job_hour: int = 8
    nudge_job_minute: int = 0
    jobs_run_on_startup: bool = False
    cron_secret: str | None = None
    notifications_enabled: bool = False
    notifications_provider: str = "noop"
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_from_email: str | None = None
    public_base_url: str = "http://localhost:3000"
    nudge_secret_key: str | None = None
    nudge_link_ttl_days: int = 7
    quote_api_url: str = "https://buddha-api.com/api/random"
    quote_api_timeout_seconds: float = 5.0


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
