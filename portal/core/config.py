from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic.aliases import AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


PORTAL_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=PORTAL_DIR / ".env", env_file_encoding="utf-8", extra="ignore")

    # External scheduling API (owns auth, persistence, validation, AI suggestions).
    upstream_base_url: str = Field(
        default="http://localhost:5000/api",
        validation_alias=AliasChoices("upstream_base_url", "UPSTREAM_BASE_URL", "API_BASE_URL"),
    )
    upstream_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        validation_alias=AliasChoices("upstream_timeout_seconds", "UPSTREAM_TIMEOUT_SECONDS"),
    )

    # Auth
    # When unset, token claims are read without signature checks and the upstream
    # remains the authority on every forwarded call.
    jwt_secret_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("jwt_secret_key", "jwt_secret", "JWT_SECRET_KEY", "JWT_SECRET"),
    )
    jwt_algorithm: str = Field(default="HS256", validation_alias=AliasChoices("jwt_algorithm", "JWT_ALGORITHM"))

    cookie_samesite: str = Field(
        default="lax",
        validation_alias=AliasChoices("cookie_samesite", "COOKIE_SAMESITE"),
    )

    student_email_domain: str = Field(
        default="@student.ksu.edu.sa",
        validation_alias=AliasChoices("student_email_domain", "STUDENT_EMAIL_DOMAIN"),
    )
    staff_email_domain: str = Field(
        default="@ksu.edu.sa",
        validation_alias=AliasChoices("staff_email_domain", "STAFF_EMAIL_DOMAIN"),
    )

    # Clients re-poll grid views and /api/sync topics at this interval.
    poll_interval_seconds: int = Field(
        default=15,
        ge=1,
        validation_alias=AliasChoices("poll_interval_seconds", "POLL_INTERVAL_SECONDS"),
    )

    # Upper bound on cached section lists (one per level, group or signed-in user view).
    snapshot_max_views: int = Field(
        default=256,
        ge=1,
        validation_alias=AliasChoices("snapshot_max_views", "SNAPSHOT_MAX_VIEWS"),
    )

    # Runtime
    environment: str = Field(default="development", validation_alias=AliasChoices("environment", "ENVIRONMENT"))
    log_level: str | None = Field(default=None, validation_alias=AliasChoices("log_level", "LOG_LEVEL"))
    log_dir: str | None = Field(default=None, validation_alias=AliasChoices("log_dir", "LOG_DIR"))
    frontend_origin: str = Field(
        default="http://localhost:5173",
        validation_alias=AliasChoices("frontend_origin", "FRONTEND_ORIGIN"),
    )

    @field_validator("upstream_base_url", "frontend_origin")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.strip().rstrip("/")

    @field_validator("cookie_samesite")
    @classmethod
    def _normalize_cookie_samesite(cls, v: str) -> str:
        return (v or "lax").strip().lower()

    @field_validator("student_email_domain", "staff_email_domain")
    @classmethod
    def _normalize_email_domain(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if v and not v.startswith("@"):
            v = "@" + v
        return v

    @field_validator("jwt_secret_key")
    @classmethod
    def _normalize_jwt_secret(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


settings = Settings()
