from __future__ import annotations

import json
import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .context import get_log_context

_RESERVED_KEYS = frozenset({"ts_iso_utc", "level", "logger", "msg"})


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, Enum):
        return value.value
    return str(value)


class JSONFormatter(logging.Formatter):
    """One JSON object per line with bound context and ``extra_fields``.

    ``static_fields`` are stamped on every line. Extra fields that would
    shadow a reserved key are kept under ``extra``.
    """

    def __init__(self, static_fields: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_iso_utc": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(self.static_fields)
        payload.update(get_log_context())

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            shadowed = {key: value for key, value in extra_fields.items() if key in _RESERVED_KEYS}
            payload.update({key: value for key, value in extra_fields.items() if key not in _RESERVED_KEYS})
            if shadowed:
                payload["extra"] = shadowed

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            payload["exc_type"] = exc_type.__name__ if exc_type else "Exception"
            payload["exc_msg"] = str(exc_value) if exc_value else ""
            payload["stack"] = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=_jsonable)
