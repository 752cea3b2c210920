from __future__ import annotations

from services.load_stats import (
    faculty_stats,
    faculty_summary,
    filter_sections,
    overall_stats,
    student_summary,
    unique_faculties,
)


SECTIONS = [
    {"id": 1, "course_code": "CS101", "course_name": "Intro", "type": "lecture", "day": "Sunday",
     "start_time": "08:00:00", "end_time": "10:00:00", "faculty_name": "Dr. Sara", "level_name": "Level 1"},
    {"id": 2, "course_code": "CS101", "course_name": "Intro", "type": "lab", "day": "Monday",
     "start_time": "10:00:00", "end_time": "11:30:00", "faculty_name": "Dr. Sara", "level_name": "Level 1"},
    {"id": 3, "course_code": "MATH201", "course_name": "Calculus", "type": "lecture", "day": "Monday",
     "start_time_hhmm": "09:00", "end_time_hhmm": "10:00", "faculty_name": "Dr. Omar", "level_name": "Level 2"},
    {"id": 4, "course_code": "PHYS101", "course_name": "Physics", "type": "tutorial", "day": "Tuesday",
     "start_time_hhmm": "11:00", "end_time_hhmm": "12:00", "faculty_name": None, "level_name": "Level 2"},
]


def test_search_matches_faculty_course_name_and_code():
    assert [s["id"] for s in filter_sections(SECTIONS, search="sara")] == [1, 2]
    assert [s["id"] for s in filter_sections(SECTIONS, search="CALC")] == [3]
    assert [s["id"] for s in filter_sections(SECTIONS, search="phys1")] == [4]
    assert filter_sections(SECTIONS, search="  ") == SECTIONS


def test_faculty_filter_is_exact():
    assert [s["id"] for s in filter_sections(SECTIONS, faculty="Dr. Omar")] == [3]
    assert filter_sections(SECTIONS, faculty="dr. omar") == []


def test_unique_faculties_sorted_without_blanks():
    assert unique_faculties(SECTIONS) == ["Dr. Omar", "Dr. Sara"]


def test_overall_stats():
    stats = overall_stats(SECTIONS)
    assert stats == {
        "total_sections": 4,
        "total_faculties": 2,
        "total_courses": 3,
        "total_levels": 2,
        "lectures": 2,
        "labs": 1,
        "assigned_sections": 3,
        "unassigned_sections": 1,
    }


def test_faculty_stats():
    stats = faculty_stats(SECTIONS, "Dr. Sara")
    assert stats["total_sections"] == 2
    assert stats["total_courses"] == 1
    assert stats["lectures"] == 1
    assert stats["labs"] == 1
    assert stats["days"] == 2
    assert stats["weekly_hours"] == "3.5"
    assert stats["level_distribution"] == {"Level 1": 2}
    assert stats["course_distribution"] == {"CS101 - Intro": 2}


def test_faculty_stats_for_unknown_faculty():
    assert faculty_stats(SECTIONS, "Nobody") is None
    assert faculty_stats(SECTIONS, "") is None


def test_summaries():
    assert student_summary(SECTIONS) == {"total_sections": 4, "total_courses": 3}
    summary = faculty_summary(SECTIONS[:3])
    assert summary["lectures"] == 2
    assert summary["labs"] == 1
    assert summary["levels"] == 2
    assert summary["days"] == 2
