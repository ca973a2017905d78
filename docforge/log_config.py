"""Logging configuration for docforge."""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

_HANDLER_MARKER = "_docforge_handler"


class LogSettings(BaseSettings):
    """Logging configuration with environment variable support."""

    APP_LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"

    # Optional rotating log file (disabled when empty)
    LOG_FILE: str = ""
    LOG_MAX_BYTES: int = 10 * 1024 * 1024  # 10MB per file (before rotation)
    LOG_BACKUP_COUNT: int = 5

    # Third-party loggers to silence (set to WARNING level)
    # Can be overridden via NOISY_LOGGERS env var (comma-separated)
    NOISY_LOGGERS: str = "botocore,boto3,aioboto3,aiobotocore,urllib3,httpx,httpcore,asyncio,websockets,strands"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def noisy_loggers(self):
        return [name.strip() for name in self.NOISY_LOGGERS.split(",") if name.strip()]


def setup_logging(settings: Optional[LogSettings] = None) -> None:
    """
    Configure the root logger.

    Safe to call more than once: handlers installed by a previous call
    are replaced, handlers installed by others are left alone.

    Args:
        settings: Logging settings. Defaults to LogSettings() (env/.env).
    """
    settings = settings or LogSettings()

    formatter = logging.Formatter(settings.LOG_FORMAT, datefmt=settings.LOG_DATE_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.APP_LOG_LEVEL.upper())

    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    setattr(console_handler, _HANDLER_MARKER, True)
    root_logger.addHandler(console_handler)

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
        )
        file_handler.setFormatter(formatter)
        setattr(file_handler, _HANDLER_MARKER, True)
        root_logger.addHandler(file_handler)

    for name in settings.noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)
