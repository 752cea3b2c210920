from __future__ import annotations

from pydantic import BaseModel, Field

from schemas.grid import WeeklyGridOut


class OverallStatsOut(BaseModel):
    total_sections: int
    total_faculties: int
    total_courses: int
    total_levels: int
    lectures: int
    labs: int
    assigned_sections: int
    unassigned_sections: int


class FacultyStatsOut(BaseModel):
    name: str
    total_sections: int
    total_courses: int
    total_levels: int
    lectures: int
    labs: int
    days: int
    weekly_hours: str
    level_distribution: dict[str, int] = Field(default_factory=dict)
    course_distribution: dict[str, int] = Field(default_factory=dict)


class LoadDashboardOut(BaseModel):
    grid: WeeklyGridOut
    overall: OverallStatsOut
    faculties: list[str]
    faculty_stats: FacultyStatsOut | None = None


class StudentScheduleOut(BaseModel):
    grid: WeeklyGridOut
    total_sections: int
    total_courses: int


class FacultyScheduleOut(BaseModel):
    grid: WeeklyGridOut
    faculty_name: str
    total_sections: int
    total_courses: int
    lectures: int
    labs: int
    levels: int
    days: int
