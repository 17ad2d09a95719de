from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
from pathlib import Path
from uuid import uuid4

import uvicorn
from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from tasklens.core.config import env_int, server_host, server_port
from tasklens.core.logging import configure_logging
from tasklens.core.logging.context import log_context

from .deps import get_session_registry
from .routes_tasks import router as tasks_router
from .routes_ui import router as ui_router
from .routes_ws import router as ws_router

_STATIC_DIR = Path(__file__).parent / "static"

logger = logging.getLogger("tasklens.api")

app = FastAPI(title="TaskLens API")
configure_logging()
app.mount("/ui/static", StaticFiles(directory=str(_STATIC_DIR)), name="ui-static")

app.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
app.include_router(ui_router, prefix="/ui", tags=["ui"])
app.include_router(ws_router, tags=["ws"])


@app.middleware("http")
async def request_context_middleware(request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid4())
    with log_context(correlation_id=correlation_id):
        response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


async def _prune_sessions_loop(interval_s: int) -> None:
    registry = get_session_registry()
    while True:
        await asyncio.sleep(interval_s)
        registry.prune()


@app.on_event("startup")
async def startup() -> None:
    app.state.session_registry = get_session_registry()
    interval_s = max(1, env_int("TASKLENS_SESSION_PRUNE_EVERY_S", 60))
    app.state.prune_task = asyncio.create_task(_prune_sessions_loop(interval_s))
    logger.info("server_started", extra={"extra_fields": {"session_mode": app.state.session_registry.mode}})


@app.on_event("shutdown")
async def shutdown() -> None:
    task = getattr(app.state, "prune_task", None)
    if task is not None:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


@app.get("/")
def root() -> RedirectResponse:
    return RedirectResponse(url="/ui", status_code=303)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/healthz")
def healthz() -> dict[str, bool]:
    return {"ok": True}


@app.get("/healthz/full")
def healthz_full() -> dict[str, object]:
    registry = get_session_registry()
    return {
        "ok": True,
        "python": {"version": sys.version.split()[0]},
        "sessions": {"mode": registry.mode, "active": len(registry)},
        "static_dir": {"path": str(_STATIC_DIR), "exists": _STATIC_DIR.is_dir()},
    }


def run() -> None:
    uvicorn.run("tasklens.apps.api.main:app", host=server_host(), port=server_port())
