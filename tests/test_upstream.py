from __future__ import annotations

import httpx
import pytest

from core.session import current_access_token
from core.upstream import UpstreamClient, UpstreamError, UpstreamUnavailableError, is_transient_upstream_error


BASE = "http://scheduling.test/api"


def _client(handler, retry_delays=(0, 0)) -> UpstreamClient:
    http = httpx.Client(base_url=BASE, transport=httpx.MockTransport(handler))
    return UpstreamClient(http, retry_delays=list(retry_delays))


def test_get_is_retried_after_transient_failure():
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) < 3:
            raise httpx.ConnectError("connection refused")
        return httpx.Response(200, json=[{"id": 1}])

    assert _client(handler).get("/sections") == [{"id": 1}]
    assert len(attempts) == 3


def test_get_gives_up_after_retries():
    def handler(request):
        raise httpx.ReadTimeout("timed out")

    with pytest.raises(UpstreamUnavailableError):
        _client(handler).get("/sections")


def test_writes_are_not_retried():
    attempts = []

    def handler(request):
        attempts.append(request)
        raise httpx.ConnectError("connection refused")

    with pytest.raises(UpstreamUnavailableError):
        _client(handler).post("/sections", {"day": "Monday"})
    assert len(attempts) == 1


def test_error_status_carries_upstream_message():
    def handler(request):
        return httpx.Response(409, json={"error": "Room already booked"})

    with pytest.raises(UpstreamError) as err:
        _client(handler).post("/sections", {})
    assert err.value.status_code == 409
    assert err.value.message == "Room already booked"
    assert err.value.payload == {"error": "Room already booked"}


def test_error_message_falls_back_to_message_then_reason():
    def handler(request):
        if request.url.path.endswith("/a"):
            return httpx.Response(400, json={"message": "Bad level"})
        return httpx.Response(500, html="<html>oops</html>")

    client = _client(handler)
    with pytest.raises(UpstreamError) as a:
        client.get("/a")
    with pytest.raises(UpstreamError) as b:
        client.get("/b")
    assert a.value.message == "Bad level"
    assert b.value.message == "Internal Server Error"


def test_bearer_token_and_clean_params():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(204)

    client = _client(handler)
    assert client.get("/sections", params={"level_id": 3, "group_id": None, "q": ""}, token="abc") is None
    assert seen[0].headers["Authorization"] == "Bearer abc"
    assert dict(seen[0].url.params) == {"level_id": "3"}


def test_context_token_is_forwarded():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={})

    reset = current_access_token.set("from-context")
    try:
        _client(handler).get("/notifications")
    finally:
        current_access_token.reset(reset)
    assert seen[0].headers["Authorization"] == "Bearer from-context"


def test_transient_detection():
    assert is_transient_upstream_error(httpx.ConnectTimeout("x"))
    assert is_transient_upstream_error(RuntimeError("getaddrinfo failed"))
    assert not is_transient_upstream_error(RuntimeError("bad request"))
