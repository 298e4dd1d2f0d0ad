"""
Logging Configuration Module.

Console logging for every process, plus an optional rotating log file.

Environment:
- ``GRANT_PORTAL_LOG_LEVEL``: console level (read through the settings model)
- ``LOG_FORMAT``: ``simple``, ``detailed`` or ``json``
- ``LOG_FILE_DIR``: directory of ``grant_portal.log``
- ``ENABLE_FILE_LOGGING``: turn the log file on or off
"""

import json
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "grant_portal.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _configured_level() -> str:
    # Imported here: the settings module logs through this one.
    try:
        from grant_portal.server.core.config import settings
    except Exception:
        return os.getenv("GRANT_PORTAL_LOG_LEVEL", "INFO").upper()
    return settings.log_level.upper()


LOG_FORMAT = os.getenv("LOG_FORMAT", "detailed")
LOG_FILE_DIR = os.getenv("LOG_FILE_DIR", "logs")
ENABLE_FILE_LOGGING = os.getenv("ENABLE_FILE_LOGGING", "true").lower() in ("true", "1", "yes")


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``extra`` fields given to the logger are kept."""

    _RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "location": f"{record.filename}:{record.lineno}",
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in self._RESERVED and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def build_formatter(fmt: str) -> logging.Formatter:
    if fmt == "json":
        return JsonFormatter()
    if fmt == "simple":
        return logging.Formatter("%(levelname)s - %(name)s - %(message)s")
    return logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        datefmt=DATE_FORMAT,
    )


# Per-logger levels; third-party loggers are kept quiet.
MODULE_LOG_LEVELS = {
    "grant_portal": "INFO",
    "grant_portal.server.api": "DEBUG",
    "grant_portal.server.auth": "DEBUG",
    "grant_portal.server.services": "DEBUG",
    "sqlalchemy": "WARNING",
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "asyncio": "WARNING",
    "multipart": "WARNING",
    "uvicorn": "INFO",
}


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = True,
) -> None:
    """
    Configure the root logger.

    Replaces any handlers already installed, so calling it twice is harmless.

    Args:
        log_level: Console level, defaults to ``GRANT_PORTAL_LOG_LEVEL``
        log_format: ``simple``, ``detailed`` or ``json``, defaults to ``LOG_FORMAT``
        enable_file: Also write the rotating log file when ``ENABLE_FILE_LOGGING`` allows it
    """
    level = (log_level or _configured_level()).upper()
    fmt = log_format or LOG_FORMAT
    formatter = build_formatter(fmt)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(formatter)
    root_logger.addHandler(console)

    file_logging = enable_file and ENABLE_FILE_LOGGING
    if file_logging:
        log_dir = Path(LOG_FILE_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` (pass ``__name__``)."""
    return logging.getLogger(name)
