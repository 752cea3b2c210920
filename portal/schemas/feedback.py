from __future__ import annotations

from pydantic import BaseModel, Field


class FeedbackCreate(BaseModel):
    text: str = Field(min_length=1, max_length=4000)
    level_id: int | str | None = None


class PreferenceIn(BaseModel):
    course_id: int
    rank: int = Field(ge=1)


class PreferencesSubmit(BaseModel):
    survey_id: int | str
    preferences: list[PreferenceIn] = Field(default_factory=list)
