from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from services.fetch_guard import FetchGuard


logger = logging.getLogger(__name__)


DEFAULT_MAX_VIEWS = 256


def view_key(topic: str, **scope: Any) -> str:
    """'schedule_builder', level_id=3, group_id=None -> 'schedule_builder:group_id=&level_id=3'."""
    parts = [f"{k}={'' if v is None else v}" for k, v in sorted(scope.items())]
    return f"{topic}:{'&'.join(parts)}"


@dataclass(frozen=True)
class Snapshot:
    key: str
    rows: list[Any]
    version: int
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    stale: bool = False
    # Serial of the fetch token that produced these rows.
    serial: int = 0


class SnapshotStore:
    """Most recent section list per view, bounded to `max_views` entries.

    Lists are replaced wholesale. A response is stored only when its fetch
    was issued after the one behind the stored snapshot; an older response
    that lands late is handed back to its caller marked stale and never
    overwrites newer data. Least recently loaded views are evicted first.
    """

    def __init__(self, guard: FetchGuard | None = None, *, max_views: int = DEFAULT_MAX_VIEWS):
        self._guard = guard or FetchGuard()
        self._lock = threading.Lock()
        self._snapshots: OrderedDict[str, Snapshot] = OrderedDict()
        self._max_views = max(1, max_views)

    def load(self, key: str, fetch: Callable[[], Any]) -> Snapshot:
        token = self._guard.issue(key)
        data = fetch()
        rows = list(data) if isinstance(data, list) else []

        with self._lock:
            current = self._snapshots.get(key)
            if self._guard.accept(token) and (current is None or token.serial > current.serial):
                snap = Snapshot(
                    key=key,
                    rows=rows,
                    version=(current.version + 1) if current else 1,
                    serial=token.serial,
                )
                self._snapshots[key] = snap
                self._snapshots.move_to_end(key)
                while len(self._snapshots) > self._max_views:
                    evicted, _ = self._snapshots.popitem(last=False)
                    logger.debug("Evicted snapshot %s", evicted)
                return snap

        logger.debug("Discarding superseded response for %s", key)
        return Snapshot(
            key=key,
            rows=rows,
            version=current.version if current else 0,
            stale=True,
            serial=token.serial,
        )

    def get(self, key: str) -> Snapshot | None:
        with self._lock:
            return self._snapshots.get(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshots)

    def drop(self, key: str) -> None:
        self._guard.invalidate(key)
        with self._lock:
            self._snapshots.pop(key, None)

    def drop_topic(self, topic: str) -> None:
        prefix = f"{topic}:"
        self._guard.invalidate_prefix(prefix)
        with self._lock:
            for key in [k for k in self._snapshots if k.startswith(prefix)]:
                del self._snapshots[key]

    def close(self) -> None:
        self._guard.close()
        with self._lock:
            self._snapshots.clear()
