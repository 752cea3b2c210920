from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


logger = logging.getLogger(__name__)


SCHEDULE_BUILDER = "schedule_builder"
COMMITTEE_DASHBOARD = "committee_dashboard"
COMMITTEE_RULES = "committee_rules"
COMMITTEE_SURVEYS = "committee_surveys"
IRREGULAR_STUDENTS = "irregular_students"

TOPICS: frozenset[str] = frozenset(
    {SCHEDULE_BUILDER, COMMITTEE_DASHBOARD, COMMITTEE_RULES, COMMITTEE_SURVEYS, IRREGULAR_STUDENTS}
)


@dataclass(frozen=True)
class ReloadSignal:
    topic: str
    type: str
    version: int
    timestamp: int
    detail: dict[str, Any] = field(default_factory=dict)


Listener = Callable[[ReloadSignal], None]


class ReloadBus:
    """Shared reload signals ("data changed, re-fetch") per topic.

    Clients poll `last(topic)` and reload when the version moves. In-process
    listeners (the snapshot store) are called synchronously on publish.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last: dict[str, ReloadSignal] = {}
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def publish(self, topic: str, change_type: str = "reload", **detail: Any) -> ReloadSignal:
        if topic not in TOPICS:
            raise ValueError(f"Unknown reload topic: {topic!r}")
        with self._lock:
            prev = self._last.get(topic)
            signal = ReloadSignal(
                topic=topic,
                type=change_type,
                version=(prev.version + 1) if prev else 1,
                timestamp=int(time.time() * 1000),
                detail=dict(detail),
            )
            self._last[topic] = signal
            listeners = list(self._listeners)

        logger.debug("Reload signal %s v%s (%s)", topic, signal.version, change_type)
        for listener in listeners:
            try:
                listener(signal)
            except Exception:
                # The mutation already happened upstream; a listener failure must not undo the response.
                logger.exception("Reload listener failed for %s", topic)
        return signal

    def last(self, topic: str) -> ReloadSignal | None:
        with self._lock:
            return self._last.get(topic)
