from __future__ import annotations

import re
from dataclasses import dataclass


DAYS: tuple[str, ...] = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday")

TIME_SLOTS: tuple[tuple[str, str], ...] = (
    ("08:00", "09:00"),
    ("09:00", "10:00"),
    ("10:00", "11:00"),
    ("11:00", "12:00"),
    ("12:00", "13:00"),
    ("13:00", "14:00"),
    ("14:00", "15:00"),
    ("15:00", "16:00"),
)

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


@dataclass(frozen=True)
class TimeSlotTable:
    """Fixed axes of the weekly grid: ordered days and one-hour slots."""

    days: tuple[str, ...] = DAYS
    slots: tuple[tuple[str, str], ...] = TIME_SLOTS

    def canonical_day(self, raw: str | None) -> str | None:
        return canonical_day(raw, days=self.days)


DEFAULT_TABLE = TimeSlotTable()


def is_hhmm(value: str | None) -> bool:
    return bool(value) and _HHMM.match(value) is not None


def to_minutes(value: str | None) -> int | None:
    """'09:30' -> 570. Returns None for anything that is not HH:MM."""
    if not value:
        return None
    m = _HHMM.match(value.strip())
    if m is None:
        return None
    return int(m.group(1)) * 60 + int(m.group(2))


def canonical_day(raw: str | None, *, days: tuple[str, ...] = DAYS) -> str | None:
    """Normalize a day name ('monday ', 'MONDAY') to its canonical form ('Monday').

    Names outside the table are title-cased and returned as-is; they simply never
    match a grid column. Empty input returns None.
    """

    if raw is None:
        return None
    s = str(raw).strip()
    if not s:
        return None
    folded = s.casefold()
    for d in days:
        if d.casefold() == folded:
            return d
    return s.title()
