from collections.abc import Callable
from datetime import date, datetime
from zoneinfo import ZoneInfo

from salon_booking.core.config import settings

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Naive wall-clock time in the business timezone (bookings are stored the same way)."""
    return datetime.now(ZoneInfo(settings.business_timezone)).replace(tzinfo=None)


def local_today() -> date:
    return local_now().date()


def to_local_naive(dt: datetime) -> datetime:
    """Convert an aware datetime to naive business-local time; naive input is assumed local."""
    if dt.tzinfo is not None:
        return dt.astimezone(ZoneInfo(settings.business_timezone)).replace(tzinfo=None)
    return dt
