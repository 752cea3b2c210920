from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_reload_bus
from core.config import settings
from services.reload_bus import TOPICS, ReloadBus


router = APIRouter()


@router.get("/{topic}")
def last_change(topic: str, bus: ReloadBus = Depends(get_reload_bus)) -> dict[str, Any]:
    """Clients poll this and re-fetch their view when `version` moves."""
    if topic not in TOPICS:
        raise HTTPException(status_code=404, detail="UNKNOWN_TOPIC")
    signal = bus.last(topic)
    body: dict[str, Any] = {"topic": topic, "version": 0, "poll_interval_seconds": settings.poll_interval_seconds}
    if signal is not None:
        body.update(asdict(signal))
    return body
