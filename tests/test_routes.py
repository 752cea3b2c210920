from __future__ import annotations

from datetime import date

import httpx

from conftest import auth, make_token
from services.reload_bus import COMMITTEE_DASHBOARD, SCHEDULE_BUILDER
from services.snapshots import view_key


COMMITTEE = auth("schedule-committee")

SECTIONS = [
    {"id": 1, "course_code": "CS101", "type": "lecture", "day": "Monday",
     "start_time_hhmm": "09:00", "end_time_hhmm": "10:00", "faculty_name": "Dr. Sara", "status": "Draft"},
    {"id": 2, "course_code": "CS102", "type": "lab", "day": "Monday",
     "start_time_hhmm": "09:00", "end_time_hhmm": "11:00", "faculty_name": "Dr. Sara", "status": "Accepted"},
    {"id": 3, "course_code": "MATH201", "course_name": "Calculus", "type": "lecture", "day": "Sunday",
     "start_time": "08:00:00", "end_time": "09:00:00", "faculty_name": "Dr. Omar"},
]


def _cell(body, start, day):
    row = next(r for r in body["rows"] if r["start"] == start)
    return next((c for c in row["cells"] if c["day"] == day), None)


def _form(**overrides):
    form = {
        "course_id": "5",
        "section_number": 1,
        "type": "lecture",
        "faculty_id": "3",
        "room_id": "",
        "day": "monday",
        "start_time": "09:00",
        "end_time": "10:00",
        "level_id": 1,
        "groups": ["2"],
        "students": [],
    }
    form.update(overrides)
    return form


def test_health_reports_upstream(client, fake_upstream):
    fake_upstream.add("GET", "/", {})
    assert client.get("/health").json() == {"app": "ok", "upstream": "ok"}


def test_requires_authentication(client):
    resp = client.get("/api/schedule-committee/grid", params={"level_id": 1})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "NOT_AUTHENTICATED"


def test_invalid_token(client):
    resp = client.get("/api/notifications", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "INVALID_TOKEN"


def test_role_guard(client, fake_upstream):
    resp = client.get("/api/schedule-committee/grid", params={"level_id": 1}, headers=auth("student"))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "NOT_AUTHORIZED"
    assert fake_upstream.calls == []


def test_builder_grid(client, fake_upstream):
    fake_upstream.add("GET", "/sections", SECTIONS)
    resp = client.get("/api/schedule-committee/grid", params={"level_id": 1}, headers=COMMITTEE)
    assert resp.status_code == 200
    body = resp.json()

    assert body["days"] == ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday"]
    assert len(body["rows"]) == 8
    assert body["version"] == 1
    assert body["poll_interval_seconds"] >= 1

    anchor = _cell(body, "09:00", "Monday")
    assert anchor["section"]["course_code"] == "CS102"
    assert anchor["span"] == 2
    assert anchor["style"]["background"] == "#dcfce7"
    assert anchor["style"]["text_color"] == "#166534"
    assert anchor["style"]["border_color"] is None
    assert _cell(body, "10:00", "Monday") is None
    assert _cell(body, "08:00", "Sunday")["section"]["course_code"] == "MATH201"
    lunch = _cell(body, "12:00", "Tuesday")
    assert lunch["blocked"] == "lunch" and lunch["interactive"] is False

    (request,) = fake_upstream.called("GET", "/sections")
    assert dict(request.url.params) == {"level_id": "1"}
    assert request.headers["Authorization"] == COMMITTEE["Authorization"]


def test_blocked_create_is_rejected_locally(client, fake_upstream, bus):
    resp = client.post(
        "/api/schedule-committee/sections",
        json=_form(day="wednesday", start_time="13:00", end_time="14:00"),
        headers=COMMITTEE,
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == "BLOCKED_WINDOW"
    assert resp.json()["message"] == "Exam slot (Monday/Wednesday 12–2)"
    assert fake_upstream.called("POST", "/sections") == []
    assert bus.last(SCHEDULE_BUILDER) is None


def test_create_without_level_is_rejected(client, fake_upstream):
    resp = client.post("/api/schedule-committee/sections", json=_form(level_id=None), headers=COMMITTEE)
    assert resp.status_code == 422
    assert resp.json()["code"] == "LEVEL_REQUIRED"
    assert fake_upstream.calls == []


def test_create_forwards_payload_and_signals_reload(client, fake_upstream, store, bus):
    fake_upstream.add("GET", "/sections", SECTIONS)
    fake_upstream.add("POST", "/sections", {"id": 10}, status=201)
    client.get("/api/schedule-committee/grid", params={"level_id": 1}, headers=COMMITTEE)
    key = view_key(SCHEDULE_BUILDER, level_id=1, group_id=None)
    assert store.get(key) is not None

    resp = client.post("/api/schedule-committee/sections", json=_form(), headers=COMMITTEE)
    assert resp.status_code == 200
    assert resp.json() == {"id": 10}

    (request,) = fake_upstream.called("POST", "/sections")
    body = fake_upstream.body_of(request)
    assert body["day"] == "Monday"
    assert body["course_id"] == 5
    assert body["room_id"] is None
    assert body["groups"] == [2]

    assert bus.last(SCHEDULE_BUILDER).version == 1
    assert store.get(key) is None

    sync = client.get(f"/api/sync/{SCHEDULE_BUILDER}", headers=COMMITTEE).json()
    assert sync["version"] == 1
    assert sync["type"] == "reload"


def test_sync_unknown_topic(client):
    resp = client.get("/api/sync/whatever", headers=auth("student"))
    assert resp.status_code == 404


def test_sync_before_any_change(client):
    body = client.get("/api/sync/committee_rules", headers=auth("faculty")).json()
    assert body["version"] == 0


def test_upstream_unreachable_maps_to_503(client, fake_upstream):
    fake_upstream.fail("GET", "/sections", httpx.ConnectError("connection refused"))
    resp = client.get("/api/schedule-committee/grid", params={"level_id": 1}, headers=COMMITTEE)
    assert resp.status_code == 503
    assert resp.json() == {
        "code": "UPSTREAM_UNAVAILABLE",
        "message": "Scheduling service temporarily unavailable. Please retry.",
    }


def test_upstream_error_is_relayed(client, fake_upstream):
    fake_upstream.add("POST", "/sections", {"error": "Room is already booked"}, status=409)
    resp = client.post("/api/schedule-committee/sections", json=_form(), headers=COMMITTEE)
    assert resp.status_code == 409
    assert resp.json() == {"code": "UPSTREAM_ERROR", "message": "Room is already booked"}


def test_available_rooms(client, fake_upstream):
    fake_upstream.add("GET", "/dropdowns/rooms", [{"id": 1}, {"id": 2}])
    fake_upstream.add("GET", "/sections/available-rooms", [{"id": 2}])

    assert client.get("/api/schedule-committee/rooms/available", headers=COMMITTEE).json() == [{"id": 1}, {"id": 2}]
    resp = client.get(
        "/api/schedule-committee/rooms/available",
        params={"day": "monday", "start_time": "09:00", "end_time": "10:00"},
        headers=COMMITTEE,
    )
    assert resp.json() == [{"id": 2}]
    (request,) = fake_upstream.called("GET", "/sections/available-rooms")
    assert request.url.params["day"] == "MONDAY"


def test_suggestions_grouped(client, fake_upstream):
    fake_upstream.add("GET", "/committee/schedule/suggest", {"schedule": [{"day": "Sunday", "course_code": "CS1"}]})
    body = client.get("/api/schedule-committee/suggest", params={"level_id": 1}, headers=COMMITTEE).json()
    assert body["days"]["Sunday"][0]["course"] == "CS1"
    assert body["days"]["Sunday"][0]["faculty"] == "-"


def test_exam_date_update(client, fake_upstream):
    fake_upstream.add("PUT", "/courses/4/exam-date", {"ok": True})
    yy = str(date.today().year)[2:]
    resp = client.put("/api/schedule-committee/exams/4", json={"exam_date": f"3/7/{yy}"}, headers=COMMITTEE)
    assert resp.status_code == 200
    (request,) = fake_upstream.called("PUT", "/courses/4/exam-date")
    assert fake_upstream.body_of(request) == {"exam_date": f"20{yy}-03-07"}

    bad = client.put("/api/schedule-committee/exams/4", json={"exam_date": "soon"}, headers=COMMITTEE)
    assert bad.status_code == 422
    assert bad.json()["detail"] == "INVALID_EXAM_DATE"


def test_rule_value_must_be_json(client, fake_upstream, bus):
    bad = client.post(
        "/api/schedule-committee/rules",
        json={"name": "Max load", "value": "{not json"},
        headers=COMMITTEE,
    )
    assert bad.status_code == 422
    assert bad.json()["detail"] == "INVALID_RULE_VALUE"

    fake_upstream.add("POST", "/committee/rules", {"id": 1})
    ok = client.post(
        "/api/schedule-committee/rules",
        json={"name": "Max load", "value": '{"hours": 12}'},
        headers=COMMITTEE,
    )
    assert ok.status_code == 200
    (request,) = fake_upstream.called("POST", "/committee/rules")
    assert fake_upstream.body_of(request)["value"] == {"hours": 12}
    assert bus.last("committee_rules").type == "created"


def test_survey_create_adds_courses(client, fake_upstream):
    fake_upstream.add("POST", "/surveys", {"id": 55})
    fake_upstream.add("POST", "/surveys/add-courses", {"ok": True})
    resp = client.post(
        "/api/schedule-committee/surveys",
        json={"title": "Electives", "level_ids": [3], "course_ids": ["8", 9]},
        headers=COMMITTEE,
    )
    assert resp.status_code == 200
    (create,) = fake_upstream.called("POST", "/surveys")
    assert fake_upstream.body_of(create)["created_by"] == 7
    (add,) = fake_upstream.called("POST", "/surveys/add-courses")
    assert fake_upstream.body_of(add) == {"survey_id": 55, "course_ids": [8, 9]}


def test_feedback_tabs_route(client, fake_upstream):
    fake_upstream.add("GET", "/feedback/level/2", [{"id": 1}])
    fake_upstream.add("GET", "/feedback/role/committee", [{"id": 2}])
    assert client.get(
        "/api/schedule-committee/feedback", params={"tab": "students", "level": 2}, headers=COMMITTEE
    ).json() == [{"id": 1}]
    assert client.get(
        "/api/schedule-committee/feedback", params={"tab": "load_committee"}, headers=COMMITTEE
    ).json() == [{"id": 2}]


def test_history_versions_have_time_ago(client, fake_upstream):
    fake_upstream.add("GET", "/schedule-history/2/versions", [{"id": 1, "created_at": "2020-01-05T10:00:00Z"}])
    body = client.get("/api/schedule-committee/history/2", headers=COMMITTEE).json()
    assert body[0]["id"] == 1
    assert body[0]["time_ago"] == "Jan 5, 2020, 10:00 AM"


def test_load_committee_dashboard(client, fake_upstream):
    fake_upstream.add("GET", "/sections", SECTIONS)
    resp = client.get(
        "/api/load-committee/dashboard", params={"faculty": "Dr. Sara"}, headers=auth("load-committee")
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["overall"]["total_sections"] == 3
    assert body["faculties"] == ["Dr. Omar", "Dr. Sara"]
    assert body["faculty_stats"]["total_sections"] == 2
    assert body["faculty_stats"]["weekly_hours"] == "3.0"
    assert len(body["grid"]["sections"]) == 2
    anchor = _cell(body["grid"], "09:00", "Monday")
    assert anchor["section"]["course_code"] == "CS102"
    assert anchor["style"]["background"] == "#ECFDF5"
    assert anchor["style"]["border_color"] == "#A7F3D0"


def test_status_update_signals_dashboard(client, fake_upstream, bus):
    fake_upstream.add("PATCH", "/sections/update_section_status/2", {"ok": True})
    resp = client.patch(
        "/api/load-committee/sections/2/status", json={"status": "Rejected"}, headers=auth("load-committee")
    )
    assert resp.status_code == 200
    signal = bus.last(COMMITTEE_DASHBOARD)
    assert signal.type == "status"
    assert signal.detail == {"section_id": 2, "status": "Rejected"}

    bad = client.patch(
        "/api/load-committee/sections/2/status", json={"status": "Maybe"}, headers=auth("load-committee")
    )
    assert bad.status_code == 422


def test_student_schedule_and_search(client, fake_upstream):
    fake_upstream.add("GET", "/sections/schedule/7", SECTIONS)
    fake_upstream.add("GET", "/sections", SECTIONS)
    mine = client.get("/api/student/schedule", headers=auth("student")).json()
    assert mine["total_sections"] == 3
    assert mine["total_courses"] == 3

    found = client.get(
        "/api/student/all-levels", params={"level_id": 1, "search": "calc"}, headers=auth("student")
    ).json()
    assert [s["course_code"] for s in found["sections"]] == ["MATH201"]


def test_student_preferences_required(client, fake_upstream):
    resp = client.post("/api/student/survey/submit", json={"survey_id": 4, "preferences": []}, headers=auth("student"))
    assert resp.status_code == 422
    assert resp.json()["detail"] == "NO_PREFERENCES"
    assert fake_upstream.calls == []


def test_faculty_schedule_accepts_wrapped_payload(client, fake_upstream):
    fake_upstream.add("GET", "/sections/faculty/7", {"facultyName": "Dr. Sara", "sections": SECTIONS[:2]})
    body = client.get("/api/faculty/schedule", headers=auth("faculty", name=None)).json()
    assert body["faculty_name"] == "Dr. Sara"
    assert body["lectures"] == 1
    assert body["labs"] == 1


def test_registrar_irregular_students(client, fake_upstream, bus):
    fake_upstream.add(
        "GET",
        "/irregular-students",
        [
            {"id": 1, "student_name": "Nora", "student_id": 11, "level_name": "Level 5"},
            {"id": 2, "student_name": "Huda", "student_id": 12, "level_name": "Level 6"},
        ],
    )
    body = client.get(
        "/api/registrar/irregular-students", params={"level": "Level 6"}, headers=auth("registrar")
    ).json()
    assert [s["id"] for s in body["students"]] == [2]
    assert body["levels"] == ["Level 5", "Level 6"]

    fake_upstream.add("DELETE", "/irregular-students/2", None, status=204)
    assert client.delete("/api/registrar/irregular-students/2", headers=auth("registrar")).status_code == 200
    assert bus.last("irregular_students").version == 1


def test_capacity_required(client, fake_upstream):
    resp = client.put("/api/registrar/sections/3/capacity", json={}, headers=auth("registrar"))
    assert resp.status_code == 422
    assert resp.json()["detail"] == "INVALID_CAPACITY"


def test_login_sets_cookie_and_landing_path(client, fake_upstream):
    fake_upstream.add("POST", "/auth/login", {"token": make_token("registrar")})
    resp = client.post("/api/auth/login", json={"email": "r@ksu.edu.sa", "password": "x"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["role"] == "registrar"
    assert body["landing_path"] == "/registrar/irregular-students"
    assert "access_token" in resp.cookies

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["role"] == "registrar"


def test_login_failure_is_relayed(client, fake_upstream):
    fake_upstream.add("POST", "/auth/login", {"message": "Invalid email or password"}, status=401)
    resp = client.post("/api/auth/login", json={"email": "r@ksu.edu.sa", "password": "x"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid email or password"


def test_register_checks_locally(client, fake_upstream):
    weak = client.post(
        "/api/auth/register", json={"email": "s@student.ksu.edu.sa", "password": "abc", "role": "student"}
    )
    assert weak.status_code == 422
    assert weak.json()["detail"] == "WEAK_PASSWORD"

    wrong_domain = client.post(
        "/api/auth/register", json={"email": "s@gmail.com", "password": "Abcdefg1!", "role": "student"}
    )
    assert wrong_domain.json()["detail"] == "INVALID_EMAIL_DOMAIN"
    assert fake_upstream.calls == []

    fake_upstream.add("POST", "/auth/register", {"message": "Check your inbox"})
    ok = client.post(
        "/api/auth/register",
        json={"email": "s@student.ksu.edu.sa", "password": "Abcdefg1!", "role": "student", "name": "S", "level_id": 3},
    )
    assert ok.json()["message"] == "Check your inbox"
    (request,) = fake_upstream.called("POST", "/auth/register")
    assert fake_upstream.body_of(request)["level_id"] == 3


def test_notifications_unread_count(client, fake_upstream):
    fake_upstream.add("GET", "/notifications/unread/count", {"count": "4"})
    assert client.get("/api/notifications/unread-count", headers=auth("student")).json() == {"count": 4}
