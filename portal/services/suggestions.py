from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def _first(row: Mapping[str, Any], *names: str) -> str:
    for name in names:
        value = row.get(name)
        if value:
            return str(value)
    return "-"


def suggestion_row(row: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "course": _first(row, "course", "course_code"),
        "faculty": _first(row, "faculty", "faculty_name"),
        "room": _first(row, "room", "room_name"),
        "start_time": row.get("start_time"),
        "end_time": row.get("end_time"),
        "type": row.get("type"),
    }


def group_suggestions(data: Any) -> dict[str, list[dict[str, Any]]]:
    """Group an AI suggestion by day.

    The suggest endpoint answers either `{"schedule": [...]}` or a schedule
    that is already grouped per day; both come out as `{day: [row, ...]}`
    with days in first-seen order.
    """

    schedule = data.get("schedule") if isinstance(data, Mapping) else data
    grouped: dict[str, list[dict[str, Any]]] = {}
    if isinstance(schedule, list):
        for row in schedule:
            if not isinstance(row, Mapping):
                continue
            grouped.setdefault(str(row.get("day") or ""), []).append(suggestion_row(row))
    elif isinstance(schedule, Mapping):
        for day, rows in schedule.items():
            grouped[str(day)] = [suggestion_row(r) for r in rows or [] if isinstance(r, Mapping)]
    return grouped
