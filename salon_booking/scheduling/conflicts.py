"""
Conflict Detection

Decides whether a candidate interval is free for a staff member. All intervals
are half-open [start, end): one ending exactly when another starts is not a
conflict.
"""

from collections.abc import Iterable
from datetime import datetime, timedelta

from salon_booking.models.booking import ACTIVE_STATUSES, Booking
from salon_booking.scheduling.schedule import Interval


def overlaps(a: Interval, b: Interval) -> bool:
    return a.start < b.end and b.start < a.end


def active_bookings(bookings: Iterable[Booking]) -> list[Booking]:
    return [b for b in bookings if b.status in ACTIVE_STATUSES]


def booking_intervals(bookings: Iterable[Booking], buffer_minutes: int = 0) -> list[Interval]:
    """Intervals held by active bookings, widened by the staff buffer on both sides."""
    pad = timedelta(minutes=buffer_minutes)
    return [Interval(b.start_at - pad, b.end_at + pad) for b in active_bookings(bookings)]


def find_conflicts(
    candidate: Interval,
    breaks: Iterable[Interval],
    bookings: Iterable[Booking],
    buffer_minutes: int = 0,
) -> list[Interval]:
    blocked = list(breaks) + booking_intervals(bookings, buffer_minutes)
    return [interval for interval in blocked if overlaps(candidate, interval)]


def is_slot_available(
    candidate: Interval,
    breaks: Iterable[Interval],
    bookings: Iterable[Booking],
    now: datetime,
    buffer_minutes: int = 0,
) -> bool:
    # Slots in the past are never offered
    if candidate.start <= now:
        return False
    return not find_conflicts(candidate, breaks, bookings, buffer_minutes)
