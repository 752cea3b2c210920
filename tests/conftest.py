from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt

from api import deps
from core.upstream import UpstreamClient
from main import app
from services.reload_bus import ReloadBus
from services.snapshots import SnapshotStore


UPSTREAM_BASE = "http://scheduling.test/api"


class FakeUpstream:
    """Canned responses for the scheduling API, keyed by (method, path)."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[httpx.Request] = []

    def add(self, method: str, path: str, body: Any = None, *, status: int = 200) -> None:
        self.routes[(method.upper(), path)] = (status, body)

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self.routes[(method.upper(), path)] = exc

    def called(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.calls if r.method == method.upper() and self.path_of(r) == path]

    @staticmethod
    def path_of(request: httpx.Request) -> str:
        path = request.url.path
        return path[len("/api"):] if path.startswith("/api") else path

    @staticmethod
    def body_of(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, self.path_of(request)))
        if route is None:
            return httpx.Response(404, json={"error": "Not found"})
        if isinstance(route, Exception):
            raise route
        status, body = route
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


def make_token(role: str, **claims: Any) -> str:
    payload = {"sub": "7", "id": 7, "role": role, "name": "Test User", **claims}
    return jwt.encode(payload, "test-secret", algorithm="HS256")


def auth(role: str, **claims: Any) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(role, **claims)}"}


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def upstream(fake_upstream: FakeUpstream) -> UpstreamClient:
    http = httpx.Client(base_url=UPSTREAM_BASE, transport=httpx.MockTransport(fake_upstream.handler))
    client = UpstreamClient(http, retry_delays=[])
    yield client
    client.close()


@pytest.fixture
def store() -> SnapshotStore:
    return SnapshotStore()


@pytest.fixture
def bus(store: SnapshotStore) -> ReloadBus:
    b = ReloadBus()
    b.subscribe(lambda signal: store.drop_topic(signal.topic))
    return b


@pytest.fixture
def client(upstream: UpstreamClient, store: SnapshotStore, bus: ReloadBus) -> TestClient:
    app.dependency_overrides[deps.get_upstream] = lambda: upstream
    app.dependency_overrides[deps.get_snapshots] = lambda: store
    app.dependency_overrides[deps.get_reload_bus] = lambda: bus
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _unsigned_tokens(monkeypatch):
    from core.config import settings

    monkeypatch.setattr(settings, "jwt_secret_key", None)
