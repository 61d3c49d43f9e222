"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./cashflow_planner.db"

    # Service
    service_name: str = "cashflow-planner"
    log_level: str = "INFO"

    # Planning windows (days)
    default_projection_days: int = 30
    dashboard_event_window_days: int = 90
    upcoming_window_days: int = 7


settings = Settings()
