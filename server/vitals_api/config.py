"""Application configuration loaded from environment variables."""
import os
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_prefix="VITALS_")

    # Database location
    data_path: str = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    db_filename: str = "vitals.db"

    @property
    def vitals_db_path(self) -> str:
        return os.path.join(self.data_path, self.db_filename)

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8083
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Trend windows in days
    trend_window_days: int = 7
    long_trend_window_days: int = 30

    # Notifications kept for clients that connect late
    notification_history: int = 100


@lru_cache
def get_settings() -> Settings:
    return Settings()
