from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from tasklens.core.config import env_int, is_on, session_mode

from .json_formatter import JSONFormatter

_LOGGER_NAME = "tasklens"
_CONFIGURED_ATTR = "_tasklens_json_logging"


def _parse_level(raw: str) -> int:
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _default_log_dir() -> Path:
    return Path.home() / ".tasklens" / "logs"


def configure_logging(log_dir: Path | None = None) -> logging.Logger:
    """Attach JSON handlers to the ``tasklens`` logger; safe to call repeatedly."""
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(_parse_level(os.getenv("TASKLENS_LOG_LEVEL", "INFO")))
    logger.propagate = False

    formatter = JSONFormatter(static_fields={"service": _LOGGER_NAME, "session_mode": session_mode()})

    if not any(
        getattr(handler, _CONFIGURED_ATTR, False) and not isinstance(handler, logging.FileHandler) for handler in logger.handlers
    ):
        stdout_handler = logging.StreamHandler(stream=sys.stdout)
        stdout_handler.setFormatter(formatter)
        setattr(stdout_handler, _CONFIGURED_ATTR, True)
        logger.addHandler(stdout_handler)

    if is_on("TASKLENS_LOG_TO_FILE", "off"):
        target_dir = Path(os.getenv("TASKLENS_LOG_DIR") or log_dir or _default_log_dir()).expanduser()
        target_dir.mkdir(parents=True, exist_ok=True)
        log_path = target_dir / "tasklens.log"

        file_exists = any(
            isinstance(handler, RotatingFileHandler) and handler.baseFilename == os.path.abspath(log_path)
            for handler in logger.handlers
        )
        if not file_exists:
            file_handler = RotatingFileHandler(
                filename=log_path,
                maxBytes=env_int("TASKLENS_LOG_MAX_BYTES", 5_000_000),
                backupCount=env_int("TASKLENS_LOG_BACKUP_COUNT", 5),
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            setattr(file_handler, _CONFIGURED_ATTR, True)
            logger.addHandler(file_handler)

    return logger
