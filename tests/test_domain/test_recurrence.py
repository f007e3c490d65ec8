"""
Tests for recurring date arithmetic
"""
from datetime import date

import pytest

from app.domain.recurrence import add_months, next_occurrence, due_occurrences


def test_add_months_clips_to_short_month():
    """31 Jan + 1 month lands on the last day of February"""
    assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
    assert add_months(date(2028, 1, 31), 1) == date(2028, 2, 29)


def test_add_months_keeps_anchor_day_after_short_month():
    assert add_months(date(2026, 2, 28), 1, anchor_day=31) == date(2026, 3, 31)


def test_add_months_across_year_boundary():
    assert add_months(date(2026, 11, 15), 3) == date(2027, 2, 15)
    assert add_months(date(2026, 1, 15), -1) == date(2025, 12, 15)


@pytest.mark.parametrize("recurring,expected", [
    ("daily", date(2026, 3, 2)),
    ("weekly", date(2026, 3, 8)),
    ("monthly", date(2026, 4, 1)),
    ("yearly", date(2027, 3, 1)),
])
def test_next_occurrence(recurring, expected):
    assert next_occurrence(recurring, date(2026, 3, 1)) == expected


def test_next_occurrence_one_off_has_none():
    assert next_occurrence("none", date(2026, 3, 1)) is None


def test_next_occurrence_rejects_unknown_frequency():
    with pytest.raises(ValueError):
        next_occurrence("hourly", date(2026, 3, 1))


def test_due_occurrences_catches_up_missed_months():
    dates = due_occurrences("monthly", date(2026, 1, 31), date(2026, 4, 30), anchor_day=31)
    assert dates == [date(2026, 1, 31), date(2026, 2, 28), date(2026, 3, 31), date(2026, 4, 30)]


def test_due_occurrences_future_start_is_empty():
    assert due_occurrences("weekly", date(2026, 5, 1), date(2026, 4, 30)) == []


def test_due_occurrences_one_off_yields_single_date():
    assert due_occurrences("none", date(2026, 1, 1), date(2026, 4, 30)) == [date(2026, 1, 1)]


def test_due_occurrences_respects_limit():
    dates = due_occurrences("daily", date(2026, 1, 1), date(2026, 12, 31), limit=5)
    assert len(dates) == 5
    assert dates[-1] == date(2026, 1, 5)
