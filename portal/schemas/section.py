from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


SectionType = Literal["lecture", "lab", "tutorial"]
SectionStatus = Literal["Draft", "Accepted", "Rejected"]


class SectionOut(BaseModel):
    # The upstream feed may carry more fields than the grid reads; keep them.
    model_config = ConfigDict(extra="allow")

    id: int | str | None = None
    course_code: str | None = None
    course_name: str | None = None
    section_number: int | None = None
    type: str | None = None
    day: str | None = None
    start_time_hhmm: str | None = None
    start_time: str | None = None
    end_time_hhmm: str | None = None
    end_time: str | None = None
    room_name: str | None = None
    faculty_name: str | None = None
    level_name: str | None = None
    status: str | None = None


class SlotContext(BaseModel):
    day: str | None = None
    start: str | None = None
    end: str | None = None
    level_id: int | str | None = None


class SectionForm(BaseModel):
    course_id: int | str | None = None
    section_number: int | str = 1
    type: str = "tutorial"
    faculty_id: int | str | None = None
    room_id: int | str | None = None
    day: str = ""
    start_time: str = ""
    end_time: str = ""
    level_id: int | str | None = None
    groups: list[int | str] = Field(default_factory=list)
    students: list[int | str] = Field(default_factory=list)


class SectionFormSeed(BaseModel):
    slot: SlotContext | None = None
    section: SectionOut | None = None


class ExternalSlotForm(BaseModel):
    course_id: int | str | None = None
    levels: list[int | str] = Field(default_factory=list)
    faculty_id: int | str | None = None
    room_id: int | str | None = None
    type: str = ""
    day: str = ""
    start_time: str = ""
    end_time: str = ""
    capacity: int | str | None = None
    limit_students: bool = False
    students: list[int | str] = Field(default_factory=list)


class SectionStatusUpdate(BaseModel):
    status: SectionStatus


class SectionCapacityUpdate(BaseModel):
    capacity: int | None = None
