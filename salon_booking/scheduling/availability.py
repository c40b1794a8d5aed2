"""
Availability Service

Answers "what can I book, and with whom" for a service on a date by composing
schedule resolution, slot generation and conflict checks. Reads only; safe to
run concurrently.

Algorithm (per staff member):
    1. Resolve the working window and breaks for the date (closed -> [])
    2. Load the staff member's bookings around the date
    3. Stop early if the daily booking cap is already reached
    4. Generate candidate starts at the slot step
    5. Keep candidates that are in the future and conflict with nothing
"""

import logging
from datetime import date, datetime, timedelta

from salon_booking.core.clock import Clock, local_now
from salon_booking.core.config import settings
from salon_booking.core.errors import InvalidDate, ServiceNotFound, ValidationError
from salon_booking.models.service import Service
from salon_booking.models.staff import Staff
from salon_booking.repositories.base import ScheduleStore
from salon_booking.scheduling.conflicts import active_bookings, is_slot_available
from salon_booking.scheduling.resolver import Closed, ScheduleResolver, day_span
from salon_booking.scheduling.schedule import Interval
from salon_booking.scheduling.slots import generate_slots

logger = logging.getLogger(__name__)

SLOT_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"


def parse_day(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError) as exc:
        raise InvalidDate(f"Invalid date {value!r}. Use YYYY-MM-DD") from exc


def eligibility_problem(staff: Staff, service: Service) -> str | None:
    """Why staff cannot perform service, or None when they can."""
    if staff.business_id != service.business_id:
        return f"Staff member {staff.id} does not work for business {service.business_id}"
    if staff.id not in service.staff_ids:
        return f"Staff member {staff.id} does not offer service {service.id}"
    if service.required_skill and service.required_skill not in (staff.skills or []):
        return f"Staff member {staff.id} lacks required skill {service.required_skill!r}"
    return None


class AvailabilityService:
    def __init__(
        self,
        store: ScheduleStore,
        clock: Clock = local_now,
        step_minutes: int | None = None,
        end_inclusive: bool | None = None,
    ) -> None:
        self.store = store
        self.clock = clock
        self.resolver = ScheduleResolver(store)
        self.step_minutes = step_minutes if step_minutes is not None else settings.slot_step_minutes
        self.end_inclusive = end_inclusive if end_inclusive is not None else settings.slot_end_inclusive

    def _target_day(self, value: date | str) -> date:
        target = parse_day(value)
        if target < self.clock().date():
            raise InvalidDate("Cannot get availability for past dates")
        return target

    async def get_service(self, service_id: str) -> Service:
        service = await self.store.get_service(service_id)
        if service is None or not service.is_active:
            raise ServiceNotFound(service_id)
        return service

    async def get_available_slots(self, staff_id: str, service_id: str, day: date | str) -> list[str]:
        target = self._target_day(day)
        service = await self.get_service(service_id)
        staff = await self.resolver.get_staff(staff_id)
        problem = eligibility_problem(staff, service)
        if problem:
            raise ValidationError(problem)
        return await self.slots_for(staff, service, target)

    async def get_combined_availability(self, service_id: str, day: date | str) -> dict[str, list[str]]:
        target = self._target_day(day)
        service = await self.get_service(service_id)
        availability: dict[str, list[str]] = {}
        for staff_id in service.staff_ids:
            staff = await self.store.get_staff(staff_id)
            if staff is None or not staff.is_active:
                continue
            if eligibility_problem(staff, service):
                continue
            slots = await self.slots_for(staff, service, target)
            if slots:
                availability[staff_id] = slots
        return availability

    async def slots_for(self, staff: Staff, service: Service, target: date) -> list[str]:
        resolution = await self.resolver.resolve_for(staff, target)
        if isinstance(resolution, Closed):
            return []

        pad = timedelta(minutes=staff.buffer_minutes)
        span = day_span(target)
        bookings = active_bookings(await self.store.list_bookings(staff.id, span.start - pad, span.end + pad))
        booked_today = [b for b in bookings if b.start_at.date() == target]
        if len(booked_today) >= staff.max_bookings_per_day:
            logger.debug("Staff %s reached %d bookings on %s", staff.id, staff.max_bookings_per_day, target)
            return []

        now = self.clock()
        duration = timedelta(minutes=service.duration_minutes)
        candidates = generate_slots(resolution, service.duration_minutes, self.step_minutes, self.end_inclusive)
        return [
            start.strftime(SLOT_FORMAT)
            for start in candidates
            if is_slot_available(
                Interval(start, start + duration), resolution.breaks, bookings, now, staff.buffer_minutes
            )
        ]
