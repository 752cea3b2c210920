from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from api.deps import get_current_user, get_upstream, user_id_of
from core.upstream import UpstreamClient
from schemas.feedback import FeedbackCreate


router = APIRouter()


@router.get("/mine")
def my_feedback(
    current_user: dict[str, Any] = Depends(get_current_user),
    upstream: UpstreamClient = Depends(get_upstream),
) -> list[Any]:
    data = upstream.get(f"/feedback/user/{user_id_of(current_user)}")
    return data if isinstance(data, list) else []


@router.post("")
def submit_feedback(
    payload: FeedbackCreate,
    current_user: dict[str, Any] = Depends(get_current_user),
    upstream: UpstreamClient = Depends(get_upstream),
) -> Any:
    level_id = payload.level_id if payload.level_id is not None else current_user.get("level_id")
    data = upstream.post("/feedback", {"text": payload.text.strip(), "level_id": level_id})
    return data or {"ok": True}
