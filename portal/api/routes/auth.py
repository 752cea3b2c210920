from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from jose import JWTError

from api.deps import get_current_user, get_upstream
from core.config import settings
from core.security import decode_token, landing_path_for
from core.upstream import UpstreamClient
from schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    PasswordCheckRequest,
    PasswordCheckResponse,
    RegisterRequest,
    ResetPasswordRequest,
)
from services.passwords import check_password, email_domain_error


router = APIRouter()

logger = logging.getLogger(__name__)


def _cookie_samesite() -> str:
    samesite = settings.cookie_samesite
    if samesite not in {"lax", "strict", "none"}:
        raise HTTPException(status_code=500, detail="INVALID_COOKIE_SAMESITE")
    return samesite


def _message(data: Any) -> str | None:
    if isinstance(data, dict):
        msg = data.get("message")
        return str(msg) if msg else None
    return None


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    response: Response,
    upstream: UpstreamClient = Depends(get_upstream),
) -> LoginResponse:
    email = payload.email.strip()
    data = upstream.post("/auth/login", {"email": email, "password": payload.password})
    token = data.get("token") if isinstance(data, dict) else None
    if not token:
        logger.warning("Login answered without a token email=%r", email)
        raise HTTPException(status_code=502, detail="NO_TOKEN")
    try:
        claims = decode_token(token)
    except JWTError:
        raise HTTPException(status_code=502, detail="INVALID_TOKEN")

    role = claims.get("role")
    max_age = None
    exp = claims.get("exp")
    if isinstance(exp, (int, float)):
        max_age = max(0, int(exp - time.time()))

    response.set_cookie(
        key="access_token",
        value=token,
        httponly=True,
        secure=settings.environment.lower() == "production",
        samesite=_cookie_samesite(),
        max_age=max_age,
        path="/",
    )
    return LoginResponse(access_token=token, role=role, landing_path=landing_path_for(role))


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response) -> MessageResponse:
    response.delete_cookie(key="access_token", path="/")
    return MessageResponse()


@router.post("/password-check", response_model=PasswordCheckResponse)
def password_check(payload: PasswordCheckRequest) -> PasswordCheckResponse:
    report = check_password(payload.password)
    return PasswordCheckResponse(
        is_valid=report.is_valid,
        missing=report.missing,
        strength=report.strength,
        color=report.color,
        progress=report.progress,
    )


@router.post("/register", response_model=MessageResponse)
def register(
    payload: RegisterRequest,
    upstream: UpstreamClient = Depends(get_upstream),
) -> MessageResponse:
    role = payload.role.strip().lower()
    email = payload.email.strip()

    if email_domain_error(
        email,
        role,
        student_domain=settings.student_email_domain,
        staff_domain=settings.staff_email_domain,
    ):
        raise HTTPException(status_code=422, detail="INVALID_EMAIL_DOMAIN")
    if not check_password(payload.password).is_valid:
        raise HTTPException(status_code=422, detail="WEAK_PASSWORD")

    body: dict[str, Any] = {"email": email, "password": payload.password, "role": role}
    if role == "student":
        body["name"] = payload.name
        body["level_id"] = payload.level_id
    elif role == "faculty":
        body["name"] = payload.name

    data = upstream.post("/auth/register", body)
    logger.info("Registered account email=%r role=%s", email, role)
    return MessageResponse(message=_message(data) or "Account created successfully")


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    payload: ForgotPasswordRequest,
    upstream: UpstreamClient = Depends(get_upstream),
) -> MessageResponse:
    data = upstream.post("/auth/request-password-reset", {"email": payload.email.strip()})
    return MessageResponse(message=_message(data))


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    payload: ResetPasswordRequest,
    upstream: UpstreamClient = Depends(get_upstream),
) -> MessageResponse:
    if not check_password(payload.new_password).is_valid:
        raise HTTPException(status_code=422, detail="WEAK_PASSWORD")
    data = upstream.post(
        "/auth/reset-password",
        {"resetToken": payload.reset_token, "newPassword": payload.new_password},
    )
    return MessageResponse(message=_message(data) or "Password reset successfully")


@router.get("/verify", response_model=MessageResponse)
def verify_email(
    token: str = Query(min_length=1),
    upstream: UpstreamClient = Depends(get_upstream),
) -> MessageResponse:
    data = upstream.get("/auth/verify", params={"token": token})
    return MessageResponse(message=_message(data))


@router.get("/me", response_model=MeResponse)
def me(current_user: dict[str, Any] = Depends(get_current_user)) -> MeResponse:
    role = current_user.get("role")
    return MeResponse(
        id=current_user.get("id") or current_user.get("sub"),
        email=current_user.get("email"),
        name=current_user.get("name"),
        role=role,
        level_id=current_user.get("level_id"),
        landing_path=landing_path_for(role),
        claims=current_user,
    )
