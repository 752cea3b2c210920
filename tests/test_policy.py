from __future__ import annotations

import pytest

from grid.policy import DEFAULT_POLICY, BlockedWindowError, is_exam_window, is_lunch
from grid.timeslots import DAYS


def test_lunch_applies_every_day():
    assert is_lunch("12:00", "13:00") is True
    assert is_lunch("11:00", "12:00") is False
    for day in DAYS:
        assert DEFAULT_POLICY.blocked_reason(day, "12:00", "13:00") == "lunch"


def test_exam_window_only_monday_and_wednesday():
    assert is_exam_window("Monday", "12:00", "13:00") is True
    assert is_exam_window("wednesday", "13:00", "14:00") is True
    assert is_exam_window("Tuesday", "12:00", "13:00") is False
    assert is_exam_window("Monday", "14:00", "15:00") is False


def test_exam_reason_outside_lunch():
    assert DEFAULT_POLICY.blocked_reason("Monday", "13:00", "14:00") == "exam"
    assert DEFAULT_POLICY.blocked_reason("Sunday", "13:00", "14:00") is None


def test_check_bookable_messages():
    with pytest.raises(BlockedWindowError) as lunch:
        DEFAULT_POLICY.check_bookable("Sunday", "12:00", "13:00")
    assert lunch.value.reason == "lunch"
    assert lunch.value.message == "Lunch break slot!"

    with pytest.raises(BlockedWindowError) as exam:
        DEFAULT_POLICY.check_bookable("monday", "13:00", "14:00")
    assert exam.value.reason == "exam"

    DEFAULT_POLICY.check_bookable("Monday", "09:00", "10:00")


def test_module_helpers_follow_default_policy(monkeypatch):
    import grid.policy as policy

    custom = policy.BlockedWindowPolicy(lunch=("11:00", "12:00"), exam_days=frozenset({"thursday"}))
    monkeypatch.setattr(policy, "DEFAULT_POLICY", custom)
    assert policy.is_lunch("11:00", "12:00") is True
    assert policy.is_lunch("12:00", "13:00") is False
    assert policy.is_exam_window("Thursday", "13:00", "14:00") is True
    assert policy.is_exam_window("Monday", "13:00", "14:00") is False
