"""Date and clock utilities"""

from datetime import date, datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def today_from(clock: Clock) -> date:
    """Calendar date of the clock's current instant"""
    return clock().date()
