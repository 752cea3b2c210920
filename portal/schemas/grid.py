from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from schemas.section import SectionOut


class CellStyleOut(BaseModel):
    background: str
    text_color: str
    border_color: str | None = None


class GridCellOut(BaseModel):
    day: str
    start: str
    end: str
    section: SectionOut | None = None
    span: int = 1
    blocked: str | None = None
    label: str | None = None
    interactive: bool = True
    style: CellStyleOut


class GridRowOut(BaseModel):
    start: str
    end: str
    cells: list[GridCellOut] = Field(default_factory=list)


class WeeklyGridOut(BaseModel):
    days: list[str]
    rows: list[GridRowOut]
    sections: list[SectionOut] = Field(default_factory=list)
    version: int = 0
    fetched_at: datetime | None = None
    stale: bool = False
    poll_interval_seconds: int
