"""
Budget domain: periods and the date window a budget tracks spending in
"""
from datetime import date, timedelta

from app.domain.recurrence import last_day_of_month

BUDGET_PERIOD_MONTHLY = "monthly"
BUDGET_PERIOD_WEEKLY = "weekly"
BUDGET_PERIOD_YEARLY = "yearly"
BUDGET_PERIOD_CUSTOM = "custom"

BUDGET_PERIODS = (
    BUDGET_PERIOD_MONTHLY,
    BUDGET_PERIOD_WEEKLY,
    BUDGET_PERIOD_YEARLY,
    BUDGET_PERIOD_CUSTOM,
)


def budget_window(
    period: str,
    start_date: date | None,
    end_date: date | None,
    today: date,
) -> tuple[date, date]:
    """
    Inclusive [start, end] window of a budget.

    Explicit dates win. Without them the window is the calendar month,
    ISO week (Mon..Sun) or calendar year that contains today.
    """
    if start_date is not None and end_date is not None:
        return start_date, end_date

    if period == BUDGET_PERIOD_WEEKLY:
        monday = today - timedelta(days=today.weekday())
        return monday, monday + timedelta(days=6)
    if period == BUDGET_PERIOD_YEARLY:
        return date(today.year, 1, 1), date(today.year, 12, 31)
    if period == BUDGET_PERIOD_MONTHLY:
        return (
            date(today.year, today.month, 1),
            date(today.year, today.month, last_day_of_month(today.year, today.month)),
        )
    raise ValueError(f"period {period} requires start_date and end_date")
