from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

import pytz

from mouna.config import settings

EXPIRY_WINDOW_DAYS = 7

_shop_timezone = pytz.timezone(settings.TIMEZONE)


def set_shop_timezone(name: str):
    """Switch the shop calendar; raises pytz.UnknownTimeZoneError for a bad name."""
    global _shop_timezone
    _shop_timezone = pytz.timezone(name)


def shop_timezone():
    return _shop_timezone


def local_now() -> datetime:
    """Current shop-local wall time, naive (the way expiry values are stored)."""
    return datetime.now(shop_timezone()).replace(tzinfo=None)


def local_today() -> date:
    return local_now().date()


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive shop-local time; naive values pass through."""
    if value is None:
        return None
    if value.tzinfo is not None:
        return value.astimezone(shop_timezone()).replace(tzinfo=None)
    return value


def expiry_day(value: Optional[datetime]) -> Optional[date]:
    """Day-granularity key used to decide whether two batches are the same."""
    value = to_local_naive(value)
    return value.date() if value is not None else None


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def expiring_soon_window(today: Optional[date] = None) -> Tuple[datetime, datetime]:
    """[start of today, end of today + 7 days], both inclusive."""
    today = today or local_today()
    return start_of_day(today), end_of_day(today + timedelta(days=EXPIRY_WINDOW_DAYS))
