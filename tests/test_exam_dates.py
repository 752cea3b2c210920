from __future__ import annotations

from datetime import date

import pytest

from services.exam_dates import InvalidExamDateError, format_exam_date, normalize_exam_date


TODAY = date(2026, 5, 1)


def test_iso_dates_pass_through():
    assert normalize_exam_date("2026-06-15", today=TODAY) == "2026-06-15"
    assert normalize_exam_date(" 2027-01-02 ", today=TODAY) == "2027-01-02"


def test_us_dates_are_converted():
    assert normalize_exam_date("3/7/26", today=TODAY) == "2026-03-07"
    assert normalize_exam_date("12/25/2026", today=TODAY) == "2026-12-25"


@pytest.mark.parametrize("raw", ["", None, "tomorrow", "2026-6-1", "2026-02-30", "3/7"])
def test_malformed_dates_are_rejected(raw):
    with pytest.raises(InvalidExamDateError):
        normalize_exam_date(raw, today=TODAY)


def test_year_range():
    assert normalize_exam_date("2025-01-01", today=TODAY) == "2025-01-01"
    assert normalize_exam_date("2031-12-31", today=TODAY) == "2031-12-31"
    with pytest.raises(InvalidExamDateError):
        normalize_exam_date("2024-12-31", today=TODAY)
    with pytest.raises(InvalidExamDateError):
        normalize_exam_date("2032-01-01", today=TODAY)


def test_format_exam_date():
    assert format_exam_date("2026-03-07T00:00:00.000Z") == "2026-03-07"
    assert format_exam_date("2026-03-07") == "2026-03-07"
    assert format_exam_date(None) == ""
    assert format_exam_date("not a date") == ""
