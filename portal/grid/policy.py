from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


BlockedReason = Literal["lunch", "exam"]

LUNCH_WINDOW: tuple[str, str] = ("12:00", "13:00")
EXAM_DAYS: frozenset[str] = frozenset({"monday", "wednesday"})
EXAM_WINDOWS: frozenset[tuple[str, str]] = frozenset({("12:00", "13:00"), ("13:00", "14:00")})


class BlockedWindowError(ValueError):
    """Raised when a section is placed in a lunch or exam-review window."""

    def __init__(self, reason: BlockedReason, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


def is_lunch(start: str | None, end: str | None) -> bool:
    return DEFAULT_POLICY.is_lunch(start, end)


def is_exam_window(day: str | None, start: str | None, end: str | None) -> bool:
    return DEFAULT_POLICY.is_exam_window(day, start, end)


@dataclass(frozen=True)
class BlockedWindowPolicy:
    """Fixed non-bookable windows.

    Blocking only affects interactivity and labels. Sections sitting in a blocked
    window are still returned untouched.
    """

    lunch: tuple[str, str] = LUNCH_WINDOW
    exam_days: frozenset[str] = EXAM_DAYS
    exam_windows: frozenset[tuple[str, str]] = EXAM_WINDOWS

    def is_lunch(self, start: str | None, end: str | None) -> bool:
        return (start, end) == self.lunch

    def is_exam_window(self, day: str | None, start: str | None, end: str | None) -> bool:
        d = (day or "").strip().lower()
        return d in self.exam_days and (start, end) in self.exam_windows

    def blocked_reason(self, day: str | None, start: str | None, end: str | None) -> BlockedReason | None:
        # Lunch wins where both apply (Mon/Wed 12:00-13:00 reads "Lunch Break").
        if self.is_lunch(start, end):
            return "lunch"
        if self.is_exam_window(day, start, end):
            return "exam"
        return None

    def check_bookable(self, day: str | None, start: str | None, end: str | None) -> None:
        reason = self.blocked_reason(day, start, end)
        if reason == "lunch":
            raise BlockedWindowError("lunch", "Lunch break slot!")
        if reason == "exam":
            raise BlockedWindowError("exam", "Exam slot (Monday/Wednesday 12–2)")


DEFAULT_POLICY = BlockedWindowPolicy()


BLOCKED_LABELS: dict[str, str] = {
    "lunch": "Lunch Break",
    "exam": "Exam Slot",
}
