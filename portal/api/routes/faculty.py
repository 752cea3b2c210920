from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from api.deps import get_current_user, get_snapshots, get_upstream, user_id_of
from core.upstream import UpstreamClient
from schemas.dashboard import FacultyScheduleOut
from services.load_stats import faculty_summary
from services.pages import FacultySchedulePage
from services.snapshots import SnapshotStore


router = APIRouter()


@router.get("/schedule", response_model=FacultyScheduleOut)
def my_schedule(
    current_user: dict[str, Any] = Depends(get_current_user),
    upstream: UpstreamClient = Depends(get_upstream),
    store: SnapshotStore = Depends(get_snapshots),
) -> FacultyScheduleOut:
    grid, sections = FacultySchedulePage(upstream, store).render(user_id=user_id_of(current_user))
    name = current_user.get("name") or next((s.faculty_name for s in sections if s.faculty_name), None)
    return FacultyScheduleOut(grid=grid, faculty_name=name or "Faculty Member", **faculty_summary(sections))
