from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from tasklens.core.logging.setup import configure_logging


def test_configure_logging_is_idempotent(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("TASKLENS_LOG_TO_FILE", "off")

    logger = logging.getLogger("tasklens")
    logger.handlers = []

    configure_logging(tmp_path)
    first_count = len(logger.handlers)

    configure_logging(tmp_path)
    assert len(logger.handlers) == first_count == 1


def test_logging_file_rotation_handler_configured(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("TASKLENS_LOG_TO_FILE", "on")
    monkeypatch.setenv("TASKLENS_LOG_DIR", str(tmp_path / "custom-logs"))
    monkeypatch.setenv("TASKLENS_LOG_MAX_BYTES", "1024")

    logger = logging.getLogger("tasklens")
    logger.handlers = []

    configure_logging()
    configure_logging()

    handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(handlers) == 1
    assert handlers[0].maxBytes == 1024
    assert (tmp_path / "custom-logs").exists()

    for handler in handlers:
        handler.close()
    logger.handlers = []


def test_log_level_comes_from_env(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("TASKLENS_LOG_LEVEL", "warning")

    logger = configure_logging(tmp_path)

    assert logger.level == logging.WARNING
    logger.setLevel(logging.INFO)
