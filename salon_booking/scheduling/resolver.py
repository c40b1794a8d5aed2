"""
Schedule resolution.

Works out, for one staff member and one calendar day, the window during which
they can be booked and the breaks inside it, or reports the day as closed.

Sources, in order:
    1. Staff weekly schedule for the weekday (not working -> closed)
    2. Time-off entries for the staff member or the whole business
       (any overlap with the day closes the entire day)
    3. Business operating hours (closed weekday -> closed; otherwise the
       staff window is clipped to them)
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from pydantic import ValidationError as SchemaError

from salon_booking.core.errors import StaffNotFound, ValidationError
from salon_booking.models.business import Business
from salon_booking.models.staff import Staff
from salon_booking.models.time_off import TimeOff
from salon_booking.repositories.base import ScheduleStore
from salon_booking.scheduling.schedule import Interval, WeeklySchedule

logger = logging.getLogger(__name__)

NOT_WORKING = "not_working"
TIME_OFF = "time_off"
BUSINESS_CLOSED = "business_closed"


@dataclass(frozen=True)
class Closed:
    reason: str


@dataclass(frozen=True)
class OpenWindow:
    start: datetime
    end: datetime
    breaks: tuple[Interval, ...] = field(default_factory=tuple)


ScheduleResolution = Closed | OpenWindow


def day_span(d: date) -> Interval:
    start = datetime.combine(d, time.min)
    return Interval(start, start + timedelta(days=1))


def load_schedule(raw: dict | None, owner: str) -> WeeklySchedule:
    try:
        return WeeklySchedule.model_validate(raw or {})
    except SchemaError as exc:
        raise ValidationError(f"Invalid weekly schedule for {owner}: {exc}") from exc


def resolve_day(
    schedule: WeeklySchedule,
    d: date,
    time_off: Iterable[TimeOff] = (),
    business_hours: WeeklySchedule | None = None,
) -> ScheduleResolution:
    """Pure resolution of one day from already-loaded records."""
    day = schedule.for_day(d)
    if not day.is_working:
        return Closed(NOT_WORKING)

    span = day_span(d)
    for entry in time_off:
        # A partial-day entry still closes the whole day
        if entry.start_at < span.end and span.start < entry.end_at:
            return Closed(TIME_OFF)

    start, end = day.window_on(d)
    if business_hours is not None:
        hours = business_hours.for_day(d)
        if not hours.is_working:
            return Closed(BUSINESS_CLOSED)
        open_at, close_at = hours.window_on(d)
        start = max(start, open_at)
        end = min(end, close_at)
        if start >= end:
            return Closed(BUSINESS_CLOSED)

    breaks = []
    for brk in day.breaks:
        brk_start, brk_end = brk.on(d)
        brk_start = max(brk_start, start)
        brk_end = min(brk_end, end)
        if brk_start < brk_end:
            breaks.append(Interval(brk_start, brk_end))
    return OpenWindow(start, end, tuple(breaks))


class ScheduleResolver:
    def __init__(self, store: ScheduleStore) -> None:
        self.store = store

    async def get_staff(self, staff_id: str) -> Staff:
        staff = await self.store.get_staff(staff_id)
        if staff is None or not staff.is_active:
            raise StaffNotFound(staff_id)
        return staff

    async def resolve_schedule(self, staff_id: str, d: date) -> ScheduleResolution:
        staff = await self.get_staff(staff_id)
        return await self.resolve_for(staff, d)

    async def resolve_for(self, staff: Staff, d: date) -> ScheduleResolution:
        business: Business | None = await self.store.get_business(staff.business_id)
        if business is not None and not business.is_active:
            return Closed(BUSINESS_CLOSED)
        span = day_span(d)
        time_off = await self.store.list_time_off(staff.business_id, staff.id, span.start, span.end)
        resolution = resolve_day(
            load_schedule(staff.schedule, f"staff {staff.id}"),
            d,
            time_off,
            load_schedule(business.hours, f"business {business.id}") if business and business.hours else None,
        )
        if isinstance(resolution, Closed):
            logger.debug("Staff %s closed on %s (%s)", staff.id, d, resolution.reason)
        return resolution
