from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_current_user, get_snapshots, get_upstream, user_id_of
from core.upstream import UpstreamClient
from schemas.dashboard import StudentScheduleOut
from schemas.feedback import PreferencesSubmit
from schemas.grid import WeeklyGridOut
from services.load_stats import filter_sections, student_summary
from services.pages import LevelSchedulePage, StudentSchedulePage, to_sections
from services.snapshots import SnapshotStore


router = APIRouter()


@router.get("/schedule", response_model=StudentScheduleOut)
def my_schedule(
    current_user: dict[str, Any] = Depends(get_current_user),
    upstream: UpstreamClient = Depends(get_upstream),
    store: SnapshotStore = Depends(get_snapshots),
) -> StudentScheduleOut:
    grid, sections = StudentSchedulePage(upstream, store).render(user_id=user_id_of(current_user))
    return StudentScheduleOut(grid=grid, **student_summary(sections))


@router.get("/levels")
def levels(upstream: UpstreamClient = Depends(get_upstream)) -> Any:
    return upstream.get("/dropdowns/levels") or []


@router.get("/groups")
def groups(level_id: int = Query(), upstream: UpstreamClient = Depends(get_upstream)) -> Any:
    return upstream.get("/dropdowns/groups", params={"level_id": level_id}) or []


@router.get("/all-levels", response_model=WeeklyGridOut)
def all_levels_schedule(
    level_id: int = Query(),
    group_id: int | None = Query(default=None),
    search: str | None = Query(default=None),
    upstream: UpstreamClient = Depends(get_upstream),
    store: SnapshotStore = Depends(get_snapshots),
) -> WeeklyGridOut:
    page = LevelSchedulePage(upstream, store)
    snap = page.load(level_id=level_id, group_id=group_id)
    sections = filter_sections(to_sections(snap.rows), search=search)
    return page.view(sections, snap)


@router.get("/survey")
def elective_survey(
    current_user: dict[str, Any] = Depends(get_current_user),
    upstream: UpstreamClient = Depends(get_upstream),
) -> dict[str, Any]:
    data = upstream.get(f"/surveys/student/{user_id_of(current_user)}")
    if not isinstance(data, dict):
        return {"survey": None, "courses": []}
    return {"survey": data.get("survey"), "courses": data.get("courses") or []}


@router.post("/survey/submit")
def submit_preferences(
    payload: PreferencesSubmit,
    current_user: dict[str, Any] = Depends(get_current_user),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Any:
    if not payload.preferences:
        raise HTTPException(status_code=422, detail="NO_PREFERENCES")
    data = upstream.post(
        f"/surveys/{payload.survey_id}/submit",
        {
            "student_id": user_id_of(current_user),
            "preferences": [p.model_dump() for p in payload.preferences],
        },
    )
    return data or {"ok": True}
