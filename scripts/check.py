#!/usr/bin/env python3
from __future__ import annotations

import importlib
import os
import sys
from urllib import error, request


REQUIRED_PYTHON = (3, 11)
REQUIRED_MODULES = ("fastapi", "uvicorn", "pydantic", "jinja2", "websockets")


def _is_on(name: str, default: str = "off") -> bool:
    return os.getenv(name, default).strip().casefold() == "on"


def _server_url() -> str:
    host = os.getenv("TASKLENS_HOST", "127.0.0.1").strip() or "127.0.0.1"
    port = os.getenv("TASKLENS_PORT", "3000").strip() or "3000"
    return f"http://{host}:{port}"


def _check_server(url: str) -> tuple[bool, str]:
    health_url = f"{url}/healthz"
    req = request.Request(health_url, method="GET")
    try:
        with request.urlopen(req, timeout=1.0) as resp:  # nosec B310
            if resp.status == 200:
                return True, f"reachable via GET {health_url}"
            return False, f"unexpected status {resp.status}"
    except error.URLError as exc:
        return False, f"{exc}"
    except OSError as exc:
        return False, f"{exc}"


def main() -> int:
    errors: list[str] = []

    if sys.version_info >= REQUIRED_PYTHON:
        print(f"OK: Python {sys.version.split()[0]} (>= 3.11)")
    else:
        errors.append(
            "Python 3.11+ is required. Fix: install Python 3.11+ and recreate your virtual environment."
        )

    for name in REQUIRED_MODULES:
        try:
            importlib.import_module(name)
            print(f"OK: import {name}")
        except ImportError as exc:
            errors.append(f"Could not import {name} ({exc}). Fix: run `python -m pip install -e .[dev]` from repo root.")

    try:
        from tasklens.apps.api.main import _STATIC_DIR

        if _STATIC_DIR.is_dir():
            print(f"OK: UI assets found at {_STATIC_DIR}")
        else:
            errors.append(f"UI assets missing at {_STATIC_DIR}. Fix: reinstall the package so static files are included.")
    except ImportError as exc:
        errors.append(f"Could not import tasklens ({exc}). Fix: run `python -m pip install -e .[dev]` from repo root.")

    mode = os.getenv("TASKLENS_SESSION_MODE", "session").strip().casefold()
    if mode in {"session", "shared"}:
        print(f"OK: session mode is {mode}")
    else:
        errors.append(f"TASKLENS_SESSION_MODE={mode!r} is not recognised. Fix: use `session` or `shared`.")

    if _is_on("TASKLENS_CHECK_SERVER"):
        url = _server_url()
        reachable, detail = _check_server(url)
        if reachable:
            print(f"OK: task server {url} is reachable ({detail})")
        else:
            errors.append(
                f"Task server is unreachable ({url}): {detail}. "
                "Fix: start it with `tasklens-server` and verify TASKLENS_HOST/TASKLENS_PORT."
            )
    else:
        print("OK: server checks skipped (TASKLENS_CHECK_SERVER=off)")

    if errors:
        for message in errors:
            print(f"ERROR: {message}")
        return 1

    print("OK: environment check passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
