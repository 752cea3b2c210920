from __future__ import annotations

import re
from datetime import date, datetime


_ISO = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class InvalidExamDateError(ValueError):
    pass


def normalize_exam_date(raw: str | None, *, today: date | None = None) -> str:
    """Normalize user input to YYYY-MM-DD.

    Accepts ISO dates and US-style M/D/YY or M/D/YYYY. The year must fall within
    one year back and five years ahead of `today`.
    """

    value = (raw or "").strip()
    if not value:
        raise InvalidExamDateError("Please enter a valid date")

    if "/" in value:
        parts = value.split("/")
        if len(parts) == 3:
            month, day, year = (p.strip() for p in parts)
            if len(year) == 2:
                year = f"20{year}"
            value = f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    if not _ISO.match(value):
        raise InvalidExamDateError("Please enter a valid date in YYYY-MM-DD format")
    try:
        parsed = datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise InvalidExamDateError("Please enter a valid date in YYYY-MM-DD format") from exc

    current_year = (today or date.today()).year
    if parsed.year < current_year - 1 or parsed.year > current_year + 5:
        raise InvalidExamDateError("Please enter a valid year (within reasonable range)")
    return value


def format_exam_date(raw: str | None) -> str:
    """Date part of an upstream timestamp for display; blank when unparseable."""
    if not raw:
        return ""
    text = str(raw).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        pass
    try:
        return datetime.strptime(text[:10], "%Y-%m-%d").date().isoformat()
    except ValueError:
        return ""
