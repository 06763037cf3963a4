# app/core/settings.py
# Full file content
import os
from enum import Enum
from typing import Optional

from pydantic_settings import BaseSettings


class LogLevel(str, Enum):
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"


class Settings(BaseSettings):
    PROJECT_NAME: str = "Crisis Safety Planner"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Step-by-step personal safety plan with PDF export"

    # General App Settings
    LOG_LEVEL: LogLevel = LogLevel.INFO

    # Database settings (local key-value store for plan snapshots)
    SQLITE_DB_PATH: str = "data/dev/planner.db"
    DEBUG_SQL: bool = False

    # Allow DATABASE_URL to be set directly, e.g. for tests
    DATABASE_URL: Optional[str] = None

    @property
    def database_url(self) -> str:
        """Construct the database URL from SQLITE_DB_PATH if not explicitly set."""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        db_path = os.path.abspath(os.path.join(os.getcwd(), self.SQLITE_DB_PATH))
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
        return f"sqlite:///{db_path}"

    # Storage key for the last exported plan (overwritten on every export)
    PLAN_STORAGE_KEY: str = "safetyPlan"

    # Where the CLI writes exported PDFs by default
    EXPORT_DIR: str = "exports"

    # Document text
    DOCUMENT_TITLE: str = "BAUER LABS SAFETY PLAN"
    DOCUMENT_FOOTER: str = "© 2024 BAUER LABS Crisis Response Platform - Confidential Safety Plan"

    class Config:
        case_sensitive = True
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


_settings_instance = None


def get_settings() -> Settings:
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
