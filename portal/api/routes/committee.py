from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_current_user, get_reload_bus, get_upstream, user_id_of
from core.upstream import UpstreamClient
from schemas.committee import ExamDateUpdate, HistoryVersionOut, RuleForm, RuleToggle, SurveyCreate
from services.exam_dates import InvalidExamDateError, format_exam_date, normalize_exam_date
from services.feedback_tabs import feedback_path
from services.history import annotate_versions
from services.reload_bus import COMMITTEE_RULES, COMMITTEE_SURVEYS, SCHEDULE_BUILDER, ReloadBus


logger = logging.getLogger(__name__)


router = APIRouter()


def _rows(data: Any) -> list[Any]:
    return data if isinstance(data, list) else []


@router.get("/exams")
def exam_schedule(
    level_id: int | None = Query(default=None),
    upstream: UpstreamClient = Depends(get_upstream),
) -> list[dict[str, Any]]:
    courses = _rows(upstream.get("/courses/exam-schedule", params={"level_id": level_id}))
    return [
        {**c, "exam_date": format_exam_date(c.get("exam_date"))}
        for c in courses
        if isinstance(c, dict)
    ]


@router.put("/exams/{course_id}")
def update_exam_date(
    course_id: int,
    payload: ExamDateUpdate,
    upstream: UpstreamClient = Depends(get_upstream),
) -> dict[str, Any]:
    try:
        exam_date = normalize_exam_date(payload.exam_date)
    except InvalidExamDateError:
        raise HTTPException(status_code=422, detail="INVALID_EXAM_DATE")
    upstream.put(f"/courses/{course_id}/exam-date", {"exam_date": exam_date})
    return {"ok": True, "course_id": course_id, "exam_date": exam_date}


def _rule_body(payload: RuleForm) -> dict[str, Any]:
    value = payload.value
    if value is None or isinstance(value, str):
        try:
            value = json.loads(value or "{}")
        except ValueError:
            raise HTTPException(status_code=422, detail="INVALID_RULE_VALUE")
    body = payload.model_dump()
    body["value"] = value
    return body


@router.get("/rules")
def list_rules(upstream: UpstreamClient = Depends(get_upstream)) -> list[Any]:
    return _rows(upstream.get("/committee/rules"))


@router.post("/rules")
def create_rule(
    payload: RuleForm,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.post("/committee/rules", _rule_body(payload))
    bus.publish(COMMITTEE_RULES, "created")
    return data


@router.put("/rules/{rule_id}")
def update_rule(
    rule_id: int,
    payload: RuleForm,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.put(f"/committee/rules/{rule_id}", _rule_body(payload))
    bus.publish(COMMITTEE_RULES, "updated", rule_id=rule_id)
    return data


@router.delete("/rules/{rule_id}")
def delete_rule(
    rule_id: int,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.delete(f"/committee/rules/{rule_id}")
    bus.publish(COMMITTEE_RULES, "deleted", rule_id=rule_id)
    return data or {"ok": True}


@router.put("/rules/{rule_id}/toggle")
def toggle_rule(
    rule_id: int,
    payload: RuleToggle,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.put(f"/committee/rules/{rule_id}/toggle", {"active": payload.active})
    bus.publish(COMMITTEE_RULES, "toggled", rule_id=rule_id, active=payload.active)
    return data or {"ok": True}


@router.get("/surveys")
def list_surveys(upstream: UpstreamClient = Depends(get_upstream)) -> list[Any]:
    return _rows(upstream.get("/surveys"))


@router.get("/surveys/electives")
def elective_courses(
    level_id: int | None = Query(default=None),
    upstream: UpstreamClient = Depends(get_upstream),
) -> list[Any]:
    return _rows(upstream.get("/courses/electives", params={"level_id": level_id}))


@router.post("/surveys")
def create_survey(
    payload: SurveyCreate,
    current_user: dict[str, Any] = Depends(get_current_user),
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    created = upstream.post(
        "/surveys",
        {
            "title": payload.title,
            "description": payload.description,
            "level_ids": payload.level_ids,
            "created_by": user_id_of(current_user),
        },
    )
    survey_id = created.get("id") if isinstance(created, dict) else None
    if payload.course_ids and survey_id is not None:
        upstream.post(
            "/surveys/add-courses",
            {"survey_id": survey_id, "course_ids": [int(c) for c in payload.course_ids]},
        )
    bus.publish(COMMITTEE_SURVEYS, "created", survey_id=survey_id)
    return created


@router.put("/surveys/{survey_id}/publish")
def publish_survey(
    survey_id: int,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.put(f"/surveys/{survey_id}/publish")
    bus.publish(COMMITTEE_SURVEYS, "published", survey_id=survey_id)
    return data or {"ok": True}


@router.put("/surveys/{survey_id}/close")
def close_survey(
    survey_id: int,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.put(f"/surveys/{survey_id}/close")
    bus.publish(COMMITTEE_SURVEYS, "closed", survey_id=survey_id)
    return data or {"ok": True}


@router.delete("/surveys/{survey_id}")
def delete_survey(
    survey_id: int,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.delete(f"/surveys/{survey_id}")
    bus.publish(COMMITTEE_SURVEYS, "deleted", survey_id=survey_id)
    return data or {"ok": True}


@router.get("/surveys/{survey_id}/results")
def survey_results(survey_id: int, upstream: UpstreamClient = Depends(get_upstream)) -> Any:
    return upstream.get(f"/surveys/{survey_id}/results")


@router.get("/feedback")
def list_feedback(
    tab: str = Query(default="all"),
    level: str | None = Query(default=None),
    upstream: UpstreamClient = Depends(get_upstream),
) -> list[Any]:
    return _rows(upstream.get(feedback_path(tab, level)))


@router.delete("/feedback/{feedback_id}")
def delete_feedback(feedback_id: int, upstream: UpstreamClient = Depends(get_upstream)) -> Any:
    data = upstream.delete(f"/feedback/{feedback_id}")
    return data or {"ok": True}


@router.get("/history/{level_id}", response_model=list[HistoryVersionOut])
def schedule_versions(level_id: int, upstream: UpstreamClient = Depends(get_upstream)) -> list[HistoryVersionOut]:
    versions = annotate_versions(upstream.get(f"/schedule-history/{level_id}/versions"))
    return [HistoryVersionOut.model_validate(v) for v in versions if v.get("id") is not None]


@router.post("/history/restore/{version_id}")
def restore_version(
    version_id: int,
    upstream: UpstreamClient = Depends(get_upstream),
    bus: ReloadBus = Depends(get_reload_bus),
) -> Any:
    data = upstream.post(f"/schedule-history/restore/{version_id}")
    logger.info("Restored schedule version id=%s", version_id)
    bus.publish(SCHEDULE_BUILDER, "reload", action="restored", version_id=version_id)
    return data or {"ok": True}


@router.get("/irregular-students")
def irregular_students(
    level_id: str | None = Query(default=None),
    search: str | None = Query(default=None),
    upstream: UpstreamClient = Depends(get_upstream),
) -> list[Any]:
    return _rows(upstream.get("/irregular-students", params={"level_id": level_id, "search": search}))
