from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from api.deps import get_reload_bus, get_snapshots, get_upstream
from core.upstream import UpstreamClient
from schemas.dashboard import FacultyStatsOut, LoadDashboardOut, OverallStatsOut
from schemas.section import SectionStatusUpdate
from services.load_stats import faculty_stats, filter_sections, overall_stats, unique_faculties
from services.pages import LoadCommitteePage, to_sections
from services.reload_bus import COMMITTEE_DASHBOARD, ReloadBus
from services.snapshots import SnapshotStore


logger = logging.getLogger(__name__)


router = APIRouter()


@router.get("/dashboard", response_model=LoadDashboardOut)
def dashboard(
    search: str | None = Query(default=None),
    faculty: str | None = Query(default=None),
    upstream: UpstreamClient = Depends(get_upstream),
    store: SnapshotStore = Depends(get_snapshots),
) -> LoadDashboardOut:
    page = LoadCommitteePage(upstream, store)
    snap = page.load()
    sections = to_sections(snap.rows)
    visible = filter_sections(sections, search=search, faculty=faculty)

    stats = faculty_stats(visible, faculty) if faculty else None
    return LoadDashboardOut(
        grid=page.view(visible, snap),
        overall=OverallStatsOut(**overall_stats(sections)),
        faculties=unique_faculties(sections),
        faculty_stats=FacultyStatsOut(**stats) if stats else None,
    )


@router.patch("/sections/{section_id}/status")
def update_status(
    section_id: int,
    payload: SectionStatusUpdate,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.patch(f"/sections/update_section_status/{section_id}", {"status": payload.status})
    logger.info("Section status updated id=%s status=%s", section_id, payload.status)
    bus.publish(COMMITTEE_DASHBOARD, "status", section_id=section_id, status=payload.status)
    return data or {"ok": True, "id": section_id, "status": payload.status}
