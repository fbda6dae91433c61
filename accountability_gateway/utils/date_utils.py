"""Date manipulation utilities"""

from datetime import date, datetime, timedelta
from typing import Callable
from zoneinfo import ZoneInfo

Clock = Callable[[], date]


def make_clock(timezone: str = "UTC") -> Clock:
    """Build a clock returning the current calendar date in the given timezone"""
    tz = ZoneInfo(timezone)

    def today() -> date:
        return datetime.now(tz).date()

    return today


def start_of_week(day: date) -> date:
    """Most recent Sunday on or before ``day`` (Sunday=0 week numbering)"""
    days_since_sunday = (day.weekday() + 1) % 7
    return day - timedelta(days=days_since_sunday)


def end_of_week(week_start: date) -> date:
    """Last day of the 7-day window starting at ``week_start`` (inclusive)"""
    return week_start + timedelta(days=6)


def is_end_of_week(day: date) -> bool:
    """Sunday is the designated end-of-week day"""
    return day.weekday() == 6


def cutoff_date(day: date, window_days: int) -> date:
    return day - timedelta(days=window_days)
