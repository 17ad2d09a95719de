from __future__ import annotations

import pytest

from tasklens.apps.api import deps


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKLENS_LOG_TO_FILE", "off")
    monkeypatch.setenv("TASKLENS_SESSION_MODE", "session")
    monkeypatch.delenv("TASKLENS_RECONNECT_DELAY_S", raising=False)
    deps.get_session_registry.cache_clear()
