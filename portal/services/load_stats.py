"""Aggregates shown on the load-committee dashboard and the schedule pages."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from grid.builder import end_of, section_field, start_of
from grid.timeslots import to_minutes


def _text(section: Any, name: str) -> str:
    value = section_field(section, name)
    return "" if value is None else str(value)


def _is_type(section: Any, kind: str) -> bool:
    return _text(section, "type").lower() == kind


def filter_sections(sections: Iterable[Any], *, search: str | None = None, faculty: str | None = None) -> list[Any]:
    """Case-insensitive search over faculty, course name and course code, then an exact faculty match."""
    out = list(sections)
    term = (search or "").strip().lower()
    if term:
        out = [
            s
            for s in out
            if term in _text(s, "faculty_name").lower()
            or term in _text(s, "course_name").lower()
            or term in _text(s, "course_code").lower()
        ]
    if faculty:
        out = [s for s in out if section_field(s, "faculty_name") == faculty]
    return out


def unique_faculties(sections: Iterable[Any]) -> list[str]:
    return sorted({str(f) for f in (section_field(s, "faculty_name") for s in sections) if f})


def duration_hours(section: Any) -> float:
    start = to_minutes(start_of(section))
    end = to_minutes(end_of(section))
    if start is None or end is None:
        return 0.0
    return (end - start) / 60


def overall_stats(sections: Sequence[Any]) -> dict[str, int]:
    return {
        "total_sections": len(sections),
        "total_faculties": len(unique_faculties(sections)),
        "total_courses": len({section_field(s, "course_code") for s in sections}),
        "total_levels": len({section_field(s, "level_name") for s in sections}),
        "lectures": sum(1 for s in sections if _is_type(s, "lecture")),
        "labs": sum(1 for s in sections if _is_type(s, "lab")),
        "assigned_sections": sum(1 for s in sections if section_field(s, "faculty_name")),
        "unassigned_sections": sum(1 for s in sections if not section_field(s, "faculty_name")),
    }


def faculty_stats(sections: Iterable[Any], faculty: str) -> dict[str, Any] | None:
    mine = [s for s in sections if section_field(s, "faculty_name") == faculty]
    if not faculty or not mine:
        return None

    levels: dict[str, int] = {}
    courses: dict[str, int] = {}
    for s in mine:
        level = _text(s, "level_name")
        levels[level] = levels.get(level, 0) + 1
        course = f"{_text(s, 'course_code')} - {_text(s, 'course_name')}"
        courses[course] = courses.get(course, 0) + 1

    weekly_hours = sum(duration_hours(s) for s in mine)
    return {
        "name": faculty,
        "total_sections": len(mine),
        "total_courses": len(courses),
        "total_levels": len(levels),
        "lectures": sum(1 for s in mine if _is_type(s, "lecture")),
        "labs": sum(1 for s in mine if _is_type(s, "lab")),
        "days": len({section_field(s, "day") for s in mine}),
        "weekly_hours": f"{weekly_hours:.1f}",
        "level_distribution": levels,
        "course_distribution": courses,
    }


def student_summary(sections: Sequence[Any]) -> dict[str, int]:
    return {
        "total_sections": len(sections),
        "total_courses": len({section_field(s, "course_code") for s in sections}),
    }


def faculty_summary(sections: Sequence[Any]) -> dict[str, int]:
    return {
        **student_summary(sections),
        "lectures": sum(1 for s in sections if _is_type(s, "lecture")),
        "labs": sum(1 for s in sections if _is_type(s, "lab")),
        "levels": len({section_field(s, "level_name") for s in sections}),
        "days": len({section_field(s, "day") for s in sections}),
    }
