from __future__ import annotations

from contextvars import ContextVar


# Bearer token of the user the current request acts for; forwarded upstream.
current_access_token: ContextVar[str | None] = ContextVar("current_access_token", default=None)


def set_current_access_token(token: str | None) -> None:
    current_access_token.set(token)


def get_current_access_token() -> str | None:
    return current_access_token.get()


# Id of the signed-in user, attached to log records.
current_user_ref: ContextVar[str | None] = ContextVar("current_user_ref", default=None)


def set_current_user_ref(user_id: object | None) -> None:
    current_user_ref.set(None if user_id in (None, "") else str(user_id))


def get_current_user_ref() -> str | None:
    return current_user_ref.get()
