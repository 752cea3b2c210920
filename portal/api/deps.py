from __future__ import annotations

from collections.abc import Callable
from typing import Any

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from core.security import decode_token
from core.session import set_current_access_token, set_current_user_ref
from core.upstream import UpstreamClient, get_upstream as _shared_upstream
from services import state
from services.reload_bus import ReloadBus
from services.snapshots import SnapshotStore


bearer_scheme = HTTPBearer(auto_error=False)


def _extract_token(request: Request, creds: HTTPAuthorizationCredentials | None) -> str | None:
    if creds is not None and creds.credentials:
        return creds.credentials
    cookie_token = request.cookies.get("access_token")
    return cookie_token or None


def get_upstream() -> UpstreamClient:
    return _shared_upstream()


def get_snapshots() -> SnapshotStore:
    return state.snapshot_store


def get_reload_bus() -> ReloadBus:
    return state.reload_bus


async def get_current_user(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """Claims of the signed-in user.

    The token is remembered for the request so upstream calls act as this user.
    Async so the context variable is set on the request task, where the sync
    route handlers running afterwards inherit it.
    """

    cached = getattr(request.state, "current_user", None)
    if isinstance(cached, dict):
        return cached

    token = _extract_token(request, creds)
    if not token:
        raise HTTPException(status_code=401, detail="NOT_AUTHENTICATED")
    try:
        payload = decode_token(token)
    except JWTError:
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")
    if not isinstance(payload, dict) or not payload.get("role"):
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")

    set_current_access_token(token)
    set_current_user_ref(payload.get("id") or payload.get("sub"))
    request.state.current_user = payload
    request.state.access_token = token
    return payload


def require_role(*roles: str) -> Callable[..., dict[str, Any]]:
    allowed = {r.lower() for r in roles}

    def dependency(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
        role = str(current_user.get("role") or "").lower()
        if role not in allowed:
            raise HTTPException(status_code=403, detail="NOT_AUTHORIZED")
        return current_user

    return dependency


def user_id_of(current_user: dict[str, Any]) -> Any:
    user_id = current_user.get("id") or current_user.get("sub") or current_user.get("user_id")
    if user_id in (None, ""):
        raise HTTPException(status_code=401, detail="INVALID_TOKEN")
    return user_id
