from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RuleForm(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    condition: str = ""
    # JSON text as typed in the rule editor, or an already-decoded object.
    value: str | dict[str, Any] | list[Any] | None = None
    type: str = "manual"


class RuleToggle(BaseModel):
    active: bool


class SurveyCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    level_ids: list[int | str] = Field(default_factory=list)
    course_ids: list[int | str] = Field(default_factory=list)


class ExamDateUpdate(BaseModel):
    exam_date: str


class ExpectedStudentsUpdate(BaseModel):
    expected_students: int | None = Field(default=None, ge=0)


class SuggestionRow(BaseModel):
    course: str = "-"
    faculty: str = "-"
    room: str = "-"
    start_time: str | None = None
    end_time: str | None = None
    type: str | None = None


class SuggestionOut(BaseModel):
    days: dict[str, list[SuggestionRow]] = Field(default_factory=dict)
    raw: Any = None


class HistoryVersionOut(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | str
    created_at: str | None = None
    time_ago: str = ""


class IrregularStudentForm(BaseModel):
    student_id: int | str
    remaining_courses: list[int | str] = Field(default_factory=list)
    required_courses: list[int | str] = Field(default_factory=list)


class IrregularStudentsOut(BaseModel):
    students: list[dict[str, Any]]
    levels: list[str]
