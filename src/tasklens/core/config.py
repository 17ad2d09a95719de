from __future__ import annotations

import os
from typing import Literal

SessionMode = Literal["session", "shared"]

_DEFAULT_SESSION_TTL_S = 3600
_DEFAULT_RECONNECT_DELAY_S = 3.0
_DEFAULT_HOST = "127.0.0.1"
_DEFAULT_PORT = 3000


def is_on(name: str, default: str = "off") -> bool:
    return os.getenv(name, default).strip().casefold() == "on"


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def session_mode() -> SessionMode:
    mode = os.getenv("TASKLENS_SESSION_MODE", "session").strip().casefold()
    return "shared" if mode == "shared" else "session"


def session_ttl_s() -> int:
    return max(1, env_int("TASKLENS_SESSION_TTL_S", _DEFAULT_SESSION_TTL_S))


def reconnect_delay_s() -> float:
    return max(0.0, env_float("TASKLENS_RECONNECT_DELAY_S", _DEFAULT_RECONNECT_DELAY_S))


def server_host() -> str:
    return os.getenv("TASKLENS_HOST", _DEFAULT_HOST)


def server_port() -> int:
    return env_int("TASKLENS_PORT", _DEFAULT_PORT)
