from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Generic, TypeVar

V = TypeVar("V")


class SlidingTTLCache(Generic[V]):
    """Keyed values that expire after ``ttl_s`` seconds without access."""

    def __init__(self, ttl_s: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_s = max(1, int(ttl_s))
        self._clock = clock
        self._data: dict[str, tuple[float, V]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> V | None:
        with self._lock:
            now = self._clock()
            entry = self._data.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= now:
                self._data.pop(key, None)
                return None
            self._data[key] = (now + self.ttl_s, value)
            return value

    def get_or_set(self, key: str, fn: Callable[[], V]) -> V:
        with self._lock:
            now = self._clock()
            entry = self._data.get(key)
            if entry is not None and entry[0] > now:
                value = entry[1]
            else:
                value = fn()
            self._data[key] = (now + self.ttl_s, value)
            return value

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._data[key] = (self._clock() + self.ttl_s, value)

    def touch(self, key: str) -> bool:
        """Extend a live entry without reading it. Returns False when absent or expired."""
        with self._lock:
            now = self._clock()
            entry = self._data.get(key)
            if entry is None or entry[0] <= now:
                return False
            self._data[key] = (now + self.ttl_s, entry[1])
            return True

    def pop(self, key: str) -> V | None:
        with self._lock:
            entry = self._data.pop(key, None)
        return entry[1] if entry is not None else None

    def prune(self) -> list[str]:
        with self._lock:
            now = self._clock()
            expired = [key for key, (expires_at, _) in self._data.items() if expires_at <= now]
            for key in expired:
                del self._data[key]
        return expired

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
