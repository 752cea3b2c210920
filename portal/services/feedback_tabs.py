from __future__ import annotations


# Feedback tab -> upstream role segment.
_ROLE_TABS: dict[str, str] = {
    "students": "student",
    "faculty": "faculty",
    "load_committee": "committee",
    "registrar": "registrar",
}


def feedback_path(tab: str | None, level: str | int | None = None) -> str:
    t = (tab or "").strip().lower()
    if t == "students" and level not in (None, ""):
        return f"/feedback/level/{level}"
    role = _ROLE_TABS.get(t)
    if role:
        return f"/feedback/role/{role}"
    return "/feedback"
