from __future__ import annotations

import logging
import time
from typing import Any, Iterable

import httpx

from core.config import settings
from core.session import get_current_access_token


logger = logging.getLogger(__name__)


class UpstreamUnavailableError(RuntimeError):
    """Raised when the scheduling API is temporarily unreachable (transient transport failure)."""


class UpstreamError(RuntimeError):
    """The scheduling API answered with an error status."""

    def __init__(self, status_code: int, message: str, payload: Any = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload


_RETRY_DELAYS_SECONDS: list[float] = [0.2, 0.5, 1.0]


def _iter_exception_messages(exc: BaseException) -> Iterable[str]:
    seen: set[int] = set()
    cur: BaseException | None = exc
    while cur is not None and id(cur) not in seen:
        seen.add(id(cur))
        msg = str(cur)
        if msg:
            yield msg
        cur = getattr(cur, "__cause__", None) or getattr(cur, "__context__", None)


def is_transient_upstream_error(exc: BaseException) -> bool:
    """Heuristically detect transient connectivity failures (DNS/timeouts/refused).

    HTTP error statuses are never transient here; only transport failures are.
    """

    if isinstance(exc, (httpx.TimeoutException, httpx.ConnectError, httpx.RemoteProtocolError)):
        return True

    joined = "\n".join(m.lower() for m in _iter_exception_messages(exc))

    # DNS resolution failures
    if "getaddrinfo failed" in joined:
        return True
    if "name or service not known" in joined:
        return True
    if "temporary failure in name resolution" in joined:
        return True

    # Connection refused / reset / closed
    if "connection refused" in joined:
        return True
    if "actively refused" in joined:
        return True
    if "connection reset" in joined:
        return True
    if "server disconnected" in joined:
        return True

    # Timeouts
    if "timeout" in joined:
        return True
    if "timed out" in joined:
        return True

    return False


def error_message(response: httpx.Response) -> str:
    """Message to show users for an upstream error response.

    Prefers the API's `error` field, then `message`, then the HTTP reason.
    """

    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("error", "message", "detail"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    text = (response.text or "").strip()
    if text and len(text) <= 300 and not text.startswith("<"):
        return text
    return response.reason_phrase or f"HTTP {response.status_code}"


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return None
    return {k: v for k, v in params.items() if v is not None and v != ""}


class UpstreamClient:
    """Thin JSON client for the external scheduling API.

    Forwards the caller's bearer token, retries idempotent GETs on transient
    transport failures and turns error statuses into `UpstreamError`.
    """

    def __init__(self, http: httpx.Client, *, retry_delays: list[float] | None = None):
        self._http = http
        self._retry_delays = list(_RETRY_DELAYS_SECONDS if retry_delays is None else retry_delays)

    @classmethod
    def from_settings(cls) -> "UpstreamClient":
        http = httpx.Client(
            base_url=settings.upstream_base_url,
            timeout=settings.upstream_timeout_seconds,
            follow_redirects=True,
            headers={"Accept": "application/json"},
        )
        return cls(http)

    def close(self) -> None:
        self._http.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        token: str | None = None,
    ) -> Any:
        method = method.upper()
        headers: dict[str, str] = {}
        bearer = token or get_current_access_token()
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"

        delays = self._retry_delays if method == "GET" else []
        attempt = 0
        while True:
            try:
                response = self._http.request(
                    method,
                    path,
                    params=_clean_params(params),
                    json=json,
                    headers=headers,
                )
                break
            except httpx.TransportError as exc:
                if not is_transient_upstream_error(exc):
                    raise UpstreamUnavailableError(str(exc)) from exc
                if attempt >= len(delays):
                    logger.warning("Upstream unreachable: %s %s", method, path, exc_info=exc)
                    raise UpstreamUnavailableError(str(exc)) from exc
                logger.debug("Retrying %s %s after transient failure (%s)", method, path, exc)
                time.sleep(delays[attempt])
                attempt += 1

        if response.status_code >= 400:
            message = error_message(response)
            logger.info("Upstream %s %s -> %s %s", method, path, response.status_code, message)
            try:
                payload = response.json()
            except ValueError:
                payload = None
            raise UpstreamError(response.status_code, message, payload)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def get(self, path: str, *, params: dict[str, Any] | None = None, token: str | None = None) -> Any:
        return self.request("GET", path, params=params, token=token)

    def post(self, path: str, json: Any = None, *, token: str | None = None) -> Any:
        return self.request("POST", path, json=json, token=token)

    def put(self, path: str, json: Any = None, *, token: str | None = None) -> Any:
        return self.request("PUT", path, json=json, token=token)

    def patch(self, path: str, json: Any = None, *, token: str | None = None) -> Any:
        return self.request("PATCH", path, json=json, token=token)

    def delete(self, path: str, *, token: str | None = None) -> Any:
        return self.request("DELETE", path, token=token)

    def ping(self) -> bool:
        try:
            self._http.request("GET", "/", timeout=3)
        except httpx.TransportError:
            return False
        return True


_client: UpstreamClient | None = None


def get_upstream() -> UpstreamClient:
    global _client
    if _client is None:
        _client = UpstreamClient.from_settings()
    return _client


def close_upstream() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
