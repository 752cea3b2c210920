from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_reload_bus, get_snapshots, get_upstream
from core.upstream import UpstreamClient
from grid.policy import DEFAULT_POLICY
from schemas.committee import SuggestionOut
from schemas.grid import WeeklyGridOut
from schemas.section import ExternalSlotForm, SectionForm, SectionFormSeed
from services.pages import ScheduleBuilderPage
from services.reload_bus import SCHEDULE_BUILDER, ReloadBus
from services.section_forms import (
    available_rooms_query,
    blank_form,
    external_slot_payload,
    form_from_section,
    section_payload,
)
from services.snapshots import SnapshotStore
from services.suggestions import group_suggestions


logger = logging.getLogger(__name__)


router = APIRouter()

_DROPDOWNS = frozenset({"levels", "courses", "faculty", "rooms", "students", "groups"})


def _check_bookable(day: str, start: str, end: str) -> None:
    DEFAULT_POLICY.check_bookable(day, str(start or "")[:5], str(end or "")[:5])


@router.get("/grid", response_model=WeeklyGridOut)
def builder_grid(
    level_id: int = Query(),
    group_id: int | None = Query(default=None),
    upstream: UpstreamClient = Depends(get_upstream),
    store: SnapshotStore = Depends(get_snapshots),
) -> WeeklyGridOut:
    grid, _sections = ScheduleBuilderPage(upstream, store).render(level_id=level_id, group_id=group_id)
    return grid


@router.get("/dropdowns/{name}")
def dropdown(
    name: str,
    level_id: str | None = Query(default=None),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Any:
    if name not in _DROPDOWNS:
        raise HTTPException(status_code=404, detail="UNKNOWN_DROPDOWN")
    return upstream.get(f"/dropdowns/{name}", params={"level_id": level_id}) or []


@router.get("/rooms/available")
def available_rooms(
    day: str | None = Query(default=None),
    start_time: str | None = Query(default=None),
    end_time: str | None = Query(default=None),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Any:
    params = available_rooms_query(day, start_time, end_time)
    if params is None:
        return upstream.get("/dropdowns/rooms") or []
    data = upstream.get("/sections/available-rooms", params=params)
    return data if isinstance(data, list) else []


@router.post("/sections/form", response_model=SectionForm)
def seed_section_form(payload: SectionFormSeed) -> SectionForm:
    if payload.section is not None:
        return SectionForm(**form_from_section(payload.section, payload.slot))
    return SectionForm(**blank_form(payload.slot))


@router.post("/sections")
def create_section(
    payload: SectionForm,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    _check_bookable(payload.day, payload.start_time, payload.end_time)
    body = section_payload(payload.model_dump())
    data = upstream.post("/sections", body)
    bus.publish(SCHEDULE_BUILDER, "reload", action="created")
    return data


@router.put("/sections/{section_id}")
def update_section(
    section_id: int,
    payload: SectionForm,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    _check_bookable(payload.day, payload.start_time, payload.end_time)
    body = section_payload(payload.model_dump())
    data = upstream.put(f"/sections/{section_id}", body)
    bus.publish(SCHEDULE_BUILDER, "reload", action="updated", section_id=section_id)
    return data


@router.delete("/sections/{section_id}")
def delete_section(
    section_id: int,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.delete(f"/sections/{section_id}")
    bus.publish(SCHEDULE_BUILDER, "reload", action="deleted", section_id=section_id)
    return data or {"ok": True}


@router.post("/levels/{level_id}/publish")
def publish_level(
    level_id: int,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.post(f"/committee/schedule/publish/{level_id}")
    logger.info("Published schedule level_id=%s", level_id)
    bus.publish(SCHEDULE_BUILDER, "reload", action="published", level_id=level_id)
    return data or {"ok": True}


@router.get("/suggest", response_model=SuggestionOut)
def suggest_schedule(
    level_id: int = Query(),
    upstream: UpstreamClient = Depends(get_upstream),
) -> SuggestionOut:
    data = upstream.get("/committee/schedule/suggest", params={"level_id": level_id, "ai": "true"})
    return SuggestionOut(days=group_suggestions(data), raw=data)


@router.get("/external-slots")
def list_external_slots(upstream: UpstreamClient = Depends(get_upstream)) -> Any:
    data = upstream.get("/sections/external")
    return data if isinstance(data, list) else []


@router.post("/external-slots")
def create_external_slot(
    payload: ExternalSlotForm,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.post("/sections", external_slot_payload(payload.model_dump()))
    bus.publish(SCHEDULE_BUILDER, "reload", action="external_created")
    return data


@router.put("/external-slots/{section_id}")
def update_external_slot(
    section_id: int,
    payload: ExternalSlotForm,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.put(f"/sections/{section_id}", external_slot_payload(payload.model_dump()))
    bus.publish(SCHEDULE_BUILDER, "reload", action="external_updated", section_id=section_id)
    return data


@router.delete("/external-slots/{section_id}")
def delete_external_slot(
    section_id: int,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.delete(f"/sections/{section_id}")
    bus.publish(SCHEDULE_BUILDER, "reload", action="external_deleted", section_id=section_id)
    return data or {"ok": True}
