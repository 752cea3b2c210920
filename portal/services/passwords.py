from __future__ import annotations

import re
from dataclasses import dataclass, field


_SPECIAL = re.compile(r"[!@#$%^&*()_+{}\[\]:;<>,.?~\\/-]")

_RULE_MESSAGES: dict[str, str] = {
    "length": "• at least 8 characters",
    "uppercase": "• an uppercase letter",
    "number": "• a number",
    "special": "• a special symbol",
}

# passed-rule count -> (label, meter color)
_STRENGTH: dict[int, tuple[str, str]] = {
    0: ("", "#dee2e6"),
    1: ("Weak", "#dc3545"),
    2: ("Fair", "#ffc107"),
    3: ("Good", "#17a2b8"),
    4: ("Strong", "#28a745"),
}


@dataclass
class PasswordReport:
    is_valid: bool
    missing: list[str] = field(default_factory=list)
    strength: str = ""
    color: str = "#dee2e6"
    progress: float = 0.0


def check_password(password: str) -> PasswordReport:
    rules = {
        "length": len(password) >= 8,
        "uppercase": re.search(r"[A-Z]", password) is not None,
        "number": re.search(r"\d", password) is not None,
        "special": _SPECIAL.search(password) is not None,
    }
    missing = [_RULE_MESSAGES[name] for name, ok in rules.items() if not ok]
    passed = sum(1 for ok in rules.values() if ok)
    strength, color = _STRENGTH[passed]
    return PasswordReport(
        is_valid=passed == len(rules),
        missing=missing,
        strength=strength,
        color=color,
        progress=passed / len(rules) * 100,
    )


def email_domain_error(email: str, role: str | None, *, student_domain: str, staff_domain: str) -> str | None:
    """Message when the address does not match the university domain for the role."""
    e = (email or "").strip().lower()
    if not e:
        return None
    if (role or "").strip().lower() == "student":
        if not e.endswith(student_domain):
            return f"Students must use {student_domain} email"
        return None
    if not role:
        return None
    if not e.endswith(staff_domain):
        return f"Faculty/Staff must use {staff_domain} email"
    return None
