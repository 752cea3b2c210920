from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from api.deps import get_upstream
from core.upstream import UpstreamClient


router = APIRouter()


@router.get("")
def list_notifications(upstream: UpstreamClient = Depends(get_upstream)) -> list[Any]:
    data = upstream.get("/notifications")
    return data if isinstance(data, list) else []


@router.get("/unread-count")
def unread_count(upstream: UpstreamClient = Depends(get_upstream)) -> dict[str, int]:
    data = upstream.get("/notifications/unread/count")
    count = data.get("count") if isinstance(data, dict) else data
    try:
        return {"count": int(count or 0)}
    except (TypeError, ValueError):
        return {"count": 0}


@router.put("/{notification_id}/read")
def mark_read(notification_id: int, upstream: UpstreamClient = Depends(get_upstream)) -> Any:
    return upstream.put(f"/notifications/{notification_id}/read") or {"ok": True}


@router.put("/read-all")
def mark_all_read(upstream: UpstreamClient = Depends(get_upstream)) -> Any:
    return upstream.put("/notifications/read-all") or {"ok": True}
