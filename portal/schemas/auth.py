from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    email: str = Field(min_length=1, max_length=254)
    password: str = Field(min_length=1, max_length=256)


class LoginResponse(BaseModel):
    ok: bool = True
    access_token: str
    token_type: str = "bearer"
    role: str | None = None
    landing_path: str = "/"


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=1, max_length=256)
    role: str = Field(min_length=1, max_length=40)
    name: str | None = Field(default=None, max_length=200)
    level_id: int | str | None = None


class PasswordCheckRequest(BaseModel):
    password: str = ""


class PasswordCheckResponse(BaseModel):
    is_valid: bool
    missing: list[str]
    strength: str
    color: str
    progress: float


class ForgotPasswordRequest(BaseModel):
    email: str = Field(min_length=3, max_length=254)


class ResetPasswordRequest(BaseModel):
    reset_token: str = Field(min_length=1)
    new_password: str = Field(min_length=1, max_length=256)


class MessageResponse(BaseModel):
    ok: bool = True
    message: str | None = None


class MeResponse(BaseModel):
    id: int | str | None = None
    email: str | None = None
    name: str | None = None
    role: str | None = None
    level_id: int | str | None = None
    landing_path: str = "/"
    claims: dict[str, Any] = Field(default_factory=dict)
