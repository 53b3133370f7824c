from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

DEFAULT_OVERDUE_THRESHOLD_DAYS = 14

@dataclass
class Settings:
    # API Settings
    api_host: str = os.getenv("API_HOST", "127.0.0.1")
    api_port: int = int(os.getenv("API_PORT", "8000"))

    # Database Settings
    data_file: str = os.getenv("LIBRARY_DB_FILE", "lending.db")

    # Lending Settings
    overdue_threshold_days: int = int(os.getenv("OVERDUE_THRESHOLD_DAYS", str(DEFAULT_OVERDUE_THRESHOLD_DAYS)))

    # Application Settings
    app_name: str = os.getenv("APP_NAME", "Library Lending Reports")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    """Install a basic root handler for CLI and API entry points."""
    level_name = "DEBUG" if settings.debug else (level or settings.log_level)
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
