from __future__ import annotations

import os
from typing import Any

from fastapi.testclient import TestClient

from main import app


# role -> grid/landing endpoints worth hitting after login
_ROLE_CHECKS: dict[str, list[tuple[str, dict[str, Any] | None]]] = {
    "schedule-committee": [
        ("/api/schedule-committee/dropdowns/levels", None),
        ("/api/schedule-committee/rules", None),
        ("/api/schedule-committee/surveys", None),
    ],
    "registrar": [("/api/registrar/irregular-students", None), ("/api/registrar/courses", None)],
    "student": [("/api/student/schedule", None), ("/api/student/levels", None)],
    "faculty": [("/api/faculty/schedule", None)],
    "load-committee": [("/api/load-committee/dashboard", None)],
}


def _count_json(value: Any) -> int:
    if isinstance(value, list):
        return len(value)
    if isinstance(value, dict):
        for key in ("sections", "students", "rows"):
            if key in value and isinstance(value[key], list):
                return len(value[key])
        grid = value.get("grid")
        if isinstance(grid, dict) and isinstance(grid.get("sections"), list):
            return len(grid["sections"])
        return len(value)
    return 1


def main() -> None:
    client = TestClient(app)

    health = client.get("/health").json()
    print(f"OK /health: {health}")
    if health.get("upstream") != "ok":
        raise SystemExit("FAIL scheduling API unreachable; check UPSTREAM_BASE_URL")

    email = os.environ.get("SMOKE_EMAIL")
    password = os.environ.get("SMOKE_PASSWORD")
    if not email or not password:
        raise SystemExit("Missing credentials. Set SMOKE_EMAIL+SMOKE_PASSWORD to run this smoke test.")

    login = client.post("/api/auth/login", json={"email": email, "password": password})
    if login.status_code >= 400:
        raise SystemExit(f"FAIL /api/auth/login: {login.status_code} {login.text}")
    role = login.json().get("role")
    print(f"OK /api/auth/login: role={role} landing={login.json().get('landing_path')}")

    # Cookie-based from here on. TestClient keeps the access_token cookie.
    checks = list(_ROLE_CHECKS.get(role or "", []))
    if role == "schedule-committee":
        levels = client.get("/api/schedule-committee/dropdowns/levels").json()
        if isinstance(levels, list) and levels and isinstance(levels[0], dict) and levels[0].get("id") is not None:
            checks.append(("/api/schedule-committee/grid", {"level_id": levels[0]["id"]}))

    for path, params in checks:
        resp = client.get(path, params=params)
        try:
            payload = resp.json()
        except ValueError:
            payload = resp.text
        if resp.status_code >= 400:
            raise SystemExit(f"FAIL {path}: {resp.status_code} {payload}")
        print(f"OK {path}: count={_count_json(payload)}")

    for topic in ("schedule_builder", "committee_dashboard"):
        sync = client.get(f"/api/sync/{topic}").json()
        print(f"OK /api/sync/{topic}: version={sync.get('version')}")


if __name__ == "__main__":
    main()
