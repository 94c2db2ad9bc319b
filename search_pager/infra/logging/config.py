"""Logging configuration setup.

Builds a ``logging.config.dictConfig`` with:
- JSONL or text formatter
- stderr handler and optional rotating file handler
- all handlers on the root logger (library loggers propagate)
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from search_pager.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)
_LOGGING_INITIALIZED = False

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(
    log_settings: LoggingSettings | None = None,
    *,
    force: bool = False,
    **configure_kwargs: Any,
) -> None:
    """Ensure logging is configured once across entrypoints.

    Args:
        log_settings: Optional logging settings instance. If omitted, settings
            are loaded via get_logging_settings().
        force: Reconfigure logging even if it was already initialized.
        **configure_kwargs: Explicit overrides for configure_logging().
    """
    global _LOGGING_INITIALIZED

    if _LOGGING_INITIALIZED and not force:
        return

    settings_obj = log_settings
    if settings_obj is None:
        from search_pager.core.settings import get_logging_settings

        settings_obj = get_logging_settings()

    log_config = {**settings_obj.to_logging_kwargs(), **configure_kwargs}
    configure_logging(**log_config)
    _LOGGING_INITIALIZED = True


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: str = "search-pager",
    file_path: str | Path | None = None,
    file_max_bytes: int = 10 * 1024 * 1024,
    file_backup_count: int = 5,
    console_enabled: bool = True,
    capture_warnings: bool = True,
) -> None:
    """Configure the root logger with dictConfig.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Emit JSON Lines instead of text.
        service_name: Static ``service`` field added to JSON records.
        file_path: Path to log file. None disables file logging.
        file_max_bytes: Maximum log file size before rotation.
        file_backup_count: Number of rotated log files to keep.
        console_enabled: Log to stderr.
        capture_warnings: Forward Python warnings to logging system.

    Example:
            configure_logging(log_level="DEBUG", json_logs=False)
    """
    if capture_warnings:
        logging.captureWarnings(True)

    formatter = "json" if json_logs else "text"
    handlers: dict[str, Any] = {}

    if console_enabled:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": formatter,
        }

    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": str(path),
            "maxBytes": file_max_bytes,
            "backupCount": file_backup_count,
            "encoding": "utf-8",
            "formatter": formatter,
        }

    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "search_pager.infra.logging.formatters.JSONFormatter",
                "static": {"service": service_name},
            },
            "text": {"format": TEXT_FORMAT},
        },
        "handlers": handlers,
        "root": {
            "level": log_level.upper(),
            "handlers": list(handlers),
        },
        "loggers": {
            # Request-level chatter from the HTTP stack
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
        },
    }

    logging.config.dictConfig(logging_config)
    logger.debug(
        "Logging configured",
        extra={"log_level": log_level.upper(), "json_logs": json_logs, "handlers": list(handlers)},
    )
