from __future__ import annotations

from functools import lru_cache

from fastapi import Query

from tasklens.core.config import session_mode, session_ttl_s
from tasklens.core.dispatch.dispatcher import Dispatcher
from tasklens.core.sessions.registry import SessionRegistry

SESSION_COOKIE = "tasklens_session"
SESSION_HEADER = "X-TaskLens-Session"


@lru_cache(maxsize=1)
def get_session_registry() -> SessionRegistry:
    return SessionRegistry(mode=session_mode(), ttl_s=session_ttl_s())


def get_dispatcher(session: str | None = Query(default=None)) -> Dispatcher:
    return get_session_registry().get(session)
