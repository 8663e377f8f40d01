"""Configuration management for Orien."""

from __future__ import annotations

import logging
import logging.handlers
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _load_dotenv() -> None:
    """Load .env file from project root or container path."""
    env_paths = [
        Path.cwd() / ".env",
        Path("/orien/.env"),
    ]
    for env_path in env_paths:
        if env_path.exists():
            load_dotenv(env_path)
            break


def _validate_provider_config() -> None:
    """Validate that the completion provider is configured."""
    api_key = os.getenv("OPENROUTER_API_KEY")
    if not api_key or api_key == "your-api-key-here":
        raise ValueError(
            "OPENROUTER_API_KEY is required. Get a key from https://openrouter.ai/keys"
        )


def _collect_env_vars() -> dict:
    """Read all config environment variables and return as constructor kwargs."""
    return {
        "openrouter_api_key": os.getenv("OPENROUTER_API_KEY", ""),
        "openrouter_api_url": os.getenv(
            "OPENROUTER_API_URL", "https://openrouter.ai/api/v1/chat/completions"
        ),
        "openrouter_max_retries": int(os.getenv("OPENROUTER_MAX_RETRIES", "2")),
        "openrouter_retry_delay": float(os.getenv("OPENROUTER_RETRY_DELAY", "1.0")),
        "openrouter_timeout": float(os.getenv("OPENROUTER_TIMEOUT", "120.0")),
        "chat_max_tokens": int(os.getenv("CHAT_MAX_TOKENS", "2000")),
        "wakeup_max_tokens": int(os.getenv("WAKEUP_MAX_TOKENS", "500")),
        "db_path": os.getenv("DB_PATH", "/orien/data/orien.db"),
        "host": os.getenv("HOST", "0.0.0.0"),
        "port": int(os.getenv("PORT", "3001")),
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "log_file": os.getenv("LOG_FILE"),
        "log_max_bytes": int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024))),
        "log_backup_count": int(os.getenv("LOG_BACKUP_COUNT", "5")),
        "tool_timeout": float(os.getenv("TOOL_TIMEOUT", "30.0")),
        "scheduler_tick_interval": float(os.getenv("SCHEDULER_TICK_INTERVAL", "1.0")),
        "idle_seconds": float(os.getenv("IDLE_SECONDS", "60.0")),
        "wakeup_interval_seconds": float(os.getenv("WAKEUP_INTERVAL_SECONDS", "600.0")),
        "app_referer": os.getenv("APP_REFERER", "http://localhost:3001"),
        "app_title": os.getenv("APP_TITLE", "Orien Chat"),
    }


@dataclass
class Config:
    """Application configuration loaded from .env file."""

    # OpenRouter configuration
    openrouter_api_key: str
    openrouter_api_url: str

    # Logging configuration
    log_level: str

    # Database configuration
    db_path: str

    # Optional fields with defaults
    openrouter_max_retries: int = 2
    openrouter_retry_delay: float = 1.0
    openrouter_timeout: float = 120.0  # Hard per-call timeout (seconds)

    # Completion budgets
    chat_max_tokens: int = 2000
    wakeup_max_tokens: int = 500

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3001

    log_file: str | None = None
    log_max_bytes: int = 10 * 1024 * 1024  # 10 MB
    log_backup_count: int = 5

    # Tool execution timeout (seconds)
    tool_timeout: float = 30.0

    # Background scheduling
    scheduler_tick_interval: float = 1.0
    idle_seconds: float = 60.0
    wakeup_interval_seconds: float = 600.0

    # Attribution headers sent to OpenRouter
    app_referer: str = "http://localhost:3001"
    app_title: str = "Orien Chat"

    @classmethod
    def load(cls) -> Config:
        """Load configuration from .env file."""
        _load_dotenv()
        _validate_provider_config()
        return cls(**_collect_env_vars())


def setup_logging(
    log_level: str,
    log_file: str | None = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional path to log file. If provided, logs to both file and console.
        max_bytes: Maximum log file size in bytes before rotation (default 10 MB).
        backup_count: Number of rotated backup files to keep (default 5).
    """
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        root_logger.info("Logging to file: %s", log_file)

    # Silence noisy third-party loggers
    for name in ("httpcore", "httpx", "aiohttp.access"):
        logging.getLogger(name).setLevel(logging.WARNING)
