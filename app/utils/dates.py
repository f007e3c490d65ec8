"""
"Today" in the configured application timezone
"""
from datetime import date, datetime
from zoneinfo import ZoneInfo

from app.config import get_settings


def now_local() -> datetime:
    return datetime.now(ZoneInfo(get_settings().TIMEZONE))


def today_local() -> date:
    return now_local().date()
