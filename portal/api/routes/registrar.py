from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_reload_bus, get_upstream
from core.upstream import UpstreamClient
from schemas.committee import ExpectedStudentsUpdate, IrregularStudentForm, IrregularStudentsOut
from schemas.section import SectionCapacityUpdate
from services.irregular_students import distinct_levels, filter_students
from services.reload_bus import IRREGULAR_STUDENTS, ReloadBus


router = APIRouter()


@router.get("/irregular-students", response_model=IrregularStudentsOut)
def list_irregular_students(
    level: str | None = Query(default=None),
    search: str | None = Query(default=None),
    upstream: UpstreamClient = Depends(get_upstream),
) -> IrregularStudentsOut:
    data = upstream.get("/irregular-students")
    rows = [r for r in data if isinstance(r, dict)] if isinstance(data, list) else []
    return IrregularStudentsOut(
        students=[dict(r) for r in filter_students(rows, level=level, search=search)],
        levels=distinct_levels(rows),
    )


@router.post("/irregular-students")
def create_irregular_student(
    payload: IrregularStudentForm,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.post("/irregular-students", payload.model_dump())
    bus.publish(IRREGULAR_STUDENTS, "reload")
    return data


@router.put("/irregular-students/{record_id}")
def update_irregular_student(
    record_id: int,
    payload: IrregularStudentForm,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.put(f"/irregular-students/{record_id}", payload.model_dump())
    bus.publish(IRREGULAR_STUDENTS, "reload")
    return data


@router.delete("/irregular-students/{record_id}")
def delete_irregular_student(
    record_id: int,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.delete(f"/irregular-students/{record_id}")
    bus.publish(IRREGULAR_STUDENTS, "reload")
    return data or {"ok": True}


@router.get("/courses")
def list_courses(
    level_id: int | None = Query(default=None),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Any:
    data = upstream.get("/courses", params={"level_id": level_id})
    return data if isinstance(data, list) else []


@router.put("/courses/{course_id}/expected-students")
def update_expected_students(
    course_id: int,
    payload: ExpectedStudentsUpdate,
    upstream: UpstreamClient = Depends(get_upstream),
) -> Any:
    expected = payload.expected_students or 0
    data = upstream.put(f"/courses/{course_id}/expected-students", {"expected_students": expected})
    return data or {"ok": True, "expected_students": expected}


@router.get("/sections")
def list_sections(
    level_id: int | None = Query(default=None),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Any:
    data = upstream.get("/sections", params={"level_id": level_id})
    return data if isinstance(data, list) else []


@router.put("/sections/{section_id}/capacity")
def update_capacity(
    section_id: int,
    payload: SectionCapacityUpdate,
    upstream: UpstreamClient = Depends(get_upstream),
) -> Any:
    if payload.capacity is None or payload.capacity < 0:
        raise HTTPException(status_code=422, detail="INVALID_CAPACITY")
    data = upstream.put(f"/sections/{section_id}/capacity", {"capacity": payload.capacity})
    return data or {"ok": True, "capacity": payload.capacity}
