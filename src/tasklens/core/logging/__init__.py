"""Structured JSON logging for the ``tasklens`` logger tree."""

from .context import get_log_context, log_context
from .json_formatter import JSONFormatter
from .setup import configure_logging

__all__ = ["JSONFormatter", "configure_logging", "get_log_context", "log_context"]
