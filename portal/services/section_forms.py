"""Section form state for the schedule builder and the external-slots page.

Forms are plain dicts shaped like the upstream section payload. Seeding reads
times with the same strategies the grid uses, so an edited section opens at
the slot where it is drawn.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from grid.builder import END_TIME_FIELDS, START_TIME_FIELDS, resolve_time, section_field


class SectionFormError(ValueError):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


def _slot_value(slot: Any, name: str) -> Any:
    if slot is None:
        return None
    return section_field(slot, name)


def _to_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _int_ids(values: Iterable[Any] | None) -> list[int]:
    out: list[int] = []
    for v in values or []:
        n = _to_int(v)
        if n:
            out.append(n)
    return out


def blank_form(slot: Any = None) -> dict[str, Any]:
    form: dict[str, Any] = {
        "course_id": "",
        "section_number": 1,
        "type": "tutorial",
        "faculty_id": "",
        "room_id": "",
        "day": "",
        "start_time": "",
        "end_time": "",
        "level_id": "",
        "groups": [],
        "students": [],
    }
    if slot is not None:
        form["day"] = str(_slot_value(slot, "day") or "").lower()
        form["start_time"] = _slot_value(slot, "start") or ""
        form["end_time"] = _slot_value(slot, "end") or ""
        form["level_id"] = _slot_value(slot, "level_id") or ""
    return form


def form_from_section(section: Any, slot: Any = None) -> dict[str, Any]:
    """Edit-form for an existing section; the clicked slot fills what the section lacks."""

    level_id = section_field(section, "level_id") or section_field(section, "levelId") or _slot_value(slot, "level_id") or ""
    start = resolve_time(section, START_TIME_FIELDS) or str(_slot_value(slot, "start") or "")[:5]
    end = resolve_time(section, END_TIME_FIELDS) or str(_slot_value(slot, "end") or "")[:5]
    day = _slot_value(slot, "day") or section_field(section, "day") or ""

    groups = section_field(section, "groups")
    students = section_field(section, "students")
    return {
        "course_id": _to_int(section_field(section, "course_id")) or "",
        "section_number": section_field(section, "section_number") or 1,
        "type": str(section_field(section, "type") or "tutorial").lower(),
        "faculty_id": _to_int(section_field(section, "faculty_id")) or "",
        "room_id": _to_int(section_field(section, "room_id")) or "",
        "day": str(day).lower(),
        "start_time": start,
        "end_time": end,
        "level_id": level_id,
        "groups": _int_ids(groups if isinstance(groups, list) else None),
        "students": _int_ids(students if isinstance(students, list) else None),
    }


def section_payload(form: Mapping[str, Any]) -> dict[str, Any]:
    """Upstream create/update body for a schedule-builder section."""

    if not form.get("level_id"):
        raise SectionFormError("LEVEL_REQUIRED", "Level ID is required.")

    day = str(form.get("day") or "")
    payload = dict(form)
    payload.update(
        {
            "day": day[:1].upper() + day[1:].lower(),
            "section_number": _to_int(form.get("section_number")) or 1,
            "course_id": _to_int(form.get("course_id")),
            "faculty_id": _to_int(form.get("faculty_id")),
            "room_id": _to_int(form.get("room_id")),
            "groups": [int(g) for g in form.get("groups") or []],
            "students": [int(s) for s in form.get("students") or []],
        }
    )
    return payload


def external_slot_payload(form: Mapping[str, Any]) -> dict[str, Any]:
    """Upstream body for a slot shared with other departments."""

    payload = dict(form)
    payload["is_external"] = True
    payload["levels"] = list(form.get("levels") or [])
    payload["students"] = list(form.get("students") or []) if form.get("limit_students") else []
    return payload


def available_rooms_query(day: str | None, start: str | None, end: str | None) -> dict[str, str] | None:
    """Query for `/sections/available-rooms`; None means "list every room" instead."""
    if not day or not start or not end:
        return None
    return {"day": day.upper(), "start_time": start, "end_time": end}
