from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class FetchToken:
    key: str
    serial: int


class FetchGuard:
    """Issues ordered fetch tokens per view key.

    Serials grow monotonically across all keys, so callers compare them to
    order responses by recency. Invalidating a key (view teardown), a key
    prefix (topic reload) or closing the guard revokes every token issued
    before that point; responses carrying a revoked token must be dropped.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._serials = itertools.count(1)
        self._last_serial = 0
        # key / prefix -> highest serial revoked for it
        self._key_floors: dict[str, int] = {}
        self._prefix_floors: dict[str, int] = {}
        self._closed = False

    def issue(self, key: str) -> FetchToken:
        with self._lock:
            serial = next(self._serials)
            self._last_serial = serial
            return FetchToken(key=key, serial=serial)

    def accept(self, token: FetchToken) -> bool:
        with self._lock:
            if self._closed:
                return False
            if token.serial <= self._key_floors.get(token.key, 0):
                return False
            for prefix, floor in self._prefix_floors.items():
                if token.key.startswith(prefix) and token.serial <= floor:
                    return False
            return True

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._key_floors[key] = self._last_serial

    def invalidate_prefix(self, prefix: str) -> None:
        with self._lock:
            self._prefix_floors[prefix] = self._last_serial

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._key_floors.clear()
            self._prefix_floors.clear()

    @property
    def closed(self) -> bool:
        return self._closed
