from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def parse_timestamp(raw: Any) -> datetime | None:
    if not raw:
        return None
    try:
        ts = datetime.fromisoformat(str(raw).strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def format_timestamp(ts: datetime) -> str:
    # "Mar 7, 2026, 09:30 AM"
    return f"{ts:%b} {ts.day}, {ts:%Y}, {ts:%I:%M %p}"


def time_ago(raw: Any, *, now: datetime | None = None) -> str:
    """Relative label for a version timestamp; older than a week shows the date."""
    ts = parse_timestamp(raw)
    if ts is None:
        return ""
    now = now or datetime.now(timezone.utc)
    seconds = max(0, int((now - ts).total_seconds()))
    mins = seconds // 60
    hours = seconds // 3600
    days = seconds // 86400
    if mins < 60:
        return f"{mins}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return format_timestamp(ts)


def annotate_versions(versions: Any, *, now: datetime | None = None) -> list[dict[str, Any]]:
    if not isinstance(versions, list):
        return []
    out: list[dict[str, Any]] = []
    for v in versions:
        if not isinstance(v, dict):
            continue
        out.append({**v, "time_ago": time_ago(v.get("created_at"), now=now)})
    return out
