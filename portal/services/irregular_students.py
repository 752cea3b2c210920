from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def filter_students(
    rows: Iterable[Mapping[str, Any]],
    *,
    level: str | None = None,
    search: str | None = None,
) -> list[Mapping[str, Any]]:
    term = (search or "").strip()
    out: list[Mapping[str, Any]] = []
    for s in rows:
        if level and s.get("level_name") != level:
            continue
        if term:
            name = str(s.get("student_name") or "").lower()
            student_id = "" if s.get("student_id") is None else str(s.get("student_id"))
            university_id = "" if s.get("university_id") is None else str(s.get("university_id"))
            if term.lower() not in name and term not in student_id and term not in university_id:
                continue
        out.append(s)
    return out


def distinct_levels(rows: Iterable[Mapping[str, Any]]) -> list[str]:
    seen: dict[str, None] = {}
    for s in rows:
        name = s.get("level_name")
        if name and name not in seen:
            seen[str(name)] = None
    return list(seen)
