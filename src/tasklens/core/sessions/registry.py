from __future__ import annotations

import logging
from uuid import uuid4

from tasklens.core.cache.ttl import SlidingTTLCache
from tasklens.core.config import SessionMode
from tasklens.core.dispatch.dispatcher import Dispatcher
from tasklens.core.tasks.store import TaskStore

SHARED_SESSION_ID = "shared"

logger = logging.getLogger("tasklens.sessions")


class SessionRegistry:
    """Hands out one dispatcher (and store) per session key.

    In ``shared`` mode every key resolves to the same dispatcher, which
    reproduces a single task list for all connections.
    """

    def __init__(self, mode: SessionMode = "session", ttl_s: int = 3600) -> None:
        self.mode = mode
        self._sessions: SlidingTTLCache[Dispatcher] = SlidingTTLCache(ttl_s=ttl_s)

    def resolve_id(self, session_id: str | None) -> str:
        if self.mode == "shared":
            return SHARED_SESSION_ID
        cleaned = (session_id or "").strip()
        return cleaned[:64] if cleaned else uuid4().hex

    def get(self, session_id: str | None) -> Dispatcher:
        key = self.resolve_id(session_id)

        def _create() -> Dispatcher:
            logger.info("session_created", extra={"extra_fields": {"session_id": key, "mode": self.mode}})
            return Dispatcher(store=TaskStore(), session_id=key)

        return self._sessions.get_or_set(key, _create)

    def keep_alive(self, dispatcher: Dispatcher) -> None:
        """Refresh the idle timer of a session held by a long-lived connection.

        A session pruned while its connection stayed open is put back, so the
        connection keeps its tasks and later reconnects find them.
        """
        key = dispatcher.session_id
        if key is None:
            return
        if not self._sessions.touch(key):
            self._sessions.set(key, dispatcher)
            logger.info("session_restored", extra={"extra_fields": {"session_id": key}})

    def drop(self, session_id: str) -> bool:
        return self._sessions.pop(session_id) is not None

    def prune(self) -> int:
        expired = self._sessions.prune()
        if expired:
            logger.info("sessions_pruned", extra={"extra_fields": {"count": len(expired)}})
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
