"""Application configuration helpers."""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[1]
PLACEHOLDER_MARKER = "YOUR_"


class Settings(BaseSettings):
    """Centralized configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=str(BASE_DIR / ".env"), env_file_encoding="utf-8")

    app_name: str = "DeviceDesk"
    environment: str = "dev"
    log_level: str = "INFO"

    # Remote table store. Either a full URL or the pieces below; placeholders
    # mean "not configured" and the local fallback is used instead.
    database_url: Optional[str] = None
    db_host: str = "YOUR_DB_HOST"
    db_port: int = 5432
    db_name: str = "devicedesk"
    db_user: str = "YOUR_DB_USER"
    db_password: str = "YOUR_DB_PASSWORD"
    db_sslmode: str = "prefer"

    # Local fallback (offline mode)
    local_store_path: Path = BASE_DIR / "local_store.json"

    # UI behavior
    page_size: int = 10
    tracking_delay_seconds: float = 0.8

    # API behavior
    allow_origins: List[str] = ["http://localhost:5173", "http://localhost:3000", "http://127.0.0.1:8080"]

    def get_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}?sslmode={self.db_sslmode}"
        )

    @property
    def remote_configured(self) -> bool:
        if self.database_url:
            return PLACEHOLDER_MARKER not in self.database_url
        credentials = (self.db_host, self.db_user, self.db_password)
        return all(value and PLACEHOLDER_MARKER not in value for value in credentials)


@lru_cache
def get_settings() -> Settings:
    return Settings()
