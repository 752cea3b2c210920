from __future__ import annotations

from typing import Any

from jose import jwt

from core.config import settings


LANDING_PATHS: dict[str, str] = {
    "student": "/student/schedule",
    "faculty": "/faculty/schedule",
    "schedule-committee": "/schedule-committee",
    "registrar": "/registrar/irregular-students",
    "load-committee": "/load-committee/dashboard",
}


def decode_token(token: str) -> dict[str, Any]:
    """Return the token's claims.

    Signatures are verified only when a shared secret is configured; the upstream
    API re-checks the token on every forwarded call either way.
    """

    if settings.jwt_secret_key:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    return jwt.get_unverified_claims(token)


def landing_path_for(role: str | None) -> str:
    return LANDING_PATHS.get((role or "").strip().lower(), "/")
