"""
Tests for the date window of a budget
"""
from datetime import date

import pytest

from app.domain.budget import budget_window


def test_monthly_window_is_calendar_month():
    assert budget_window("monthly", None, None, date(2026, 2, 10)) == (date(2026, 2, 1), date(2026, 2, 28))


def test_weekly_window_is_monday_to_sunday():
    # 2026-03-15 is a Sunday
    assert budget_window("weekly", None, None, date(2026, 3, 15)) == (date(2026, 3, 9), date(2026, 3, 15))


def test_yearly_window():
    assert budget_window("yearly", None, None, date(2026, 7, 1)) == (date(2026, 1, 1), date(2026, 12, 31))


def test_explicit_dates_win_over_period():
    window = budget_window("monthly", date(2026, 1, 10), date(2026, 2, 9), date(2026, 7, 1))
    assert window == (date(2026, 1, 10), date(2026, 2, 9))


def test_custom_without_dates_is_rejected():
    with pytest.raises(ValueError):
        budget_window("custom", None, None, date(2026, 7, 1))
