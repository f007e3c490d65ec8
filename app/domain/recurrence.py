"""
Date arithmetic for recurring scheduled payments.

Uses date only (no timezone).

Frequencies:
- none: one-off, no next occurrence
- daily / weekly: fixed step in days
- monthly / yearly: same day of month, clipped to the last day of shorter months
"""
import calendar
from datetime import date, timedelta


RECURRING_NONE = "none"
RECURRING_DAILY = "daily"
RECURRING_WEEKLY = "weekly"
RECURRING_MONTHLY = "monthly"
RECURRING_YEARLY = "yearly"

RECURRING_TYPES = (
    RECURRING_NONE,
    RECURRING_DAILY,
    RECURRING_WEEKLY,
    RECURRING_MONTHLY,
    RECURRING_YEARLY,
)


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(d: date, n: int, anchor_day: int | None = None) -> date:
    """
    Shift a date by n months.

    anchor_day is the preferred day of month; it is clipped to the month length,
    so 31 Jan + 1 month = 28/29 Feb and, with anchor_day=31, + 2 months = 31 Mar.
    """
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    last = last_day_of_month(year, month)
    day = min(anchor_day or d.day, last)
    return date(year, month, day)


def next_occurrence(recurring: str, d: date, anchor_day: int | None = None) -> date | None:
    """Date of the occurrence after d, or None for one-off payments."""
    if recurring == RECURRING_NONE:
        return None
    if recurring == RECURRING_DAILY:
        return d + timedelta(days=1)
    if recurring == RECURRING_WEEKLY:
        return d + timedelta(weeks=1)
    if recurring == RECURRING_MONTHLY:
        return add_months(d, 1, anchor_day)
    if recurring == RECURRING_YEARLY:
        return add_months(d, 12, anchor_day)
    raise ValueError(f"invalid recurring: {recurring}")


def due_occurrences(
    recurring: str,
    start: date,
    today: date,
    anchor_day: int | None = None,
    limit: int | None = None,
) -> list[date]:
    """
    All occurrences from start up to and including today.

    A one-off payment yields at most one date. limit caps how many missed
    occurrences are returned.
    """
    out: list[date] = []
    d: date | None = start
    while d is not None and d <= today:
        out.append(d)
        if limit is not None and len(out) >= limit:
            break
        d = next_occurrence(recurring, d, anchor_day)
    return out
