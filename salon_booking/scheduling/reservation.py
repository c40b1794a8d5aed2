"""
Reservations

The only write path into a staff member's calendar. The conflict check and the
insert run as one unit under a per-staff lock, so two requests can never both
pass the check and create overlapping bookings. The lock wait is bounded; a
timeout surfaces as BusyError.

Layers, outermost first:
    1. In-process asyncio.Lock per staff member (bounded wait)
    2. Store-level lock on the staff row (SELECT ... FOR UPDATE in SQL)
    3. Store-level overlap constraint on insert (exclusion constraint in SQL)
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timedelta

from salon_booking.core.clock import Clock, local_now, to_local_naive
from salon_booking.core.config import settings
from salon_booking.core.errors import BusyError, ConflictError, ValidationError
from salon_booking.models.booking import Booking, BookingStatus
from salon_booking.models.staff import Staff
from salon_booking.repositories.base import BookingStore
from salon_booking.scheduling.availability import AvailabilityService, eligibility_problem
from salon_booking.scheduling.conflicts import active_bookings, find_conflicts
from salon_booking.scheduling.resolver import Closed, day_span
from salon_booking.scheduling.schedule import Interval

logger = logging.getLogger(__name__)


class StaffLocks:
    """Registry of per-staff mutexes shared by every request in the process."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, staff_id: str) -> asyncio.Lock:
        lock = self._locks.get(staff_id)
        if lock is None:
            lock = self._locks[staff_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, staff_id: str, timeout: float) -> AsyncIterator[None]:
        lock = self.get(staff_id)
        try:
            await asyncio.wait_for(lock.acquire(), timeout)
        except asyncio.TimeoutError:
            logger.warning("Timed out after %.1fs waiting for staff %s lock", timeout, staff_id)
            raise BusyError("Staff calendar is busy, please retry") from None
        try:
            yield
        finally:
            lock.release()


staff_locks = StaffLocks()


class ReservationService:
    def __init__(
        self,
        store: BookingStore,
        clock: Clock = local_now,
        locks: StaffLocks | None = None,
        lock_timeout: float | None = None,
    ) -> None:
        self.store = store
        self.clock = clock
        self.locks = locks if locks is not None else staff_locks
        self.lock_timeout = (
            lock_timeout if lock_timeout is not None else settings.reservation_lock_timeout_seconds
        )
        self.availability = AvailabilityService(store, clock=clock)

    async def check_and_reserve(
        self,
        staff_id: str,
        service_id: str,
        start: datetime,
        customer_name: str = "",
        customer_contact: str = "",
        status: BookingStatus = BookingStatus.CONFIRMED,
    ) -> Booking:
        service = await self.availability.get_service(service_id)
        staff = await self.availability.resolver.get_staff(staff_id)
        problem = eligibility_problem(staff, service)
        if problem:
            raise ValidationError(problem)

        start = to_local_naive(start)
        if start.second or start.microsecond:
            raise ValidationError("Start time must be a whole minute")
        end = start + timedelta(minutes=service.duration_minutes)
        if start <= self.clock():
            raise ValidationError("Cannot book a slot in the past")

        async with self.locks.hold(staff_id, self.lock_timeout):
            try:
                await self.store.lock_staff(staff_id)
                await self._ensure_free(staff, Interval(start, end))
                booking = await self.store.add_booking(
                    Booking(
                        business_id=service.business_id,
                        staff_id=staff_id,
                        service_id=service_id,
                        customer_name=customer_name,
                        customer_contact=customer_contact,
                        start_at=start,
                        end_at=end,
                        status=status.value,
                    )
                )
                await self.store.commit()
            except Exception:
                await self.store.rollback()
                raise
        logger.info(
            "Booked %s for staff %s, service %s at %s-%s",
            booking.id, staff_id, service_id, start, end.strftime("%H:%M"),
        )
        return booking

    async def _ensure_free(self, staff: Staff, candidate: Interval) -> None:
        target = candidate.start.date()
        resolution = await self.availability.resolver.resolve_for(staff, target)
        if isinstance(resolution, Closed):
            raise ConflictError(f"Staff member {staff.id} is not available on {target.isoformat()}")

        fits_end = (
            candidate.end <= resolution.end
            if self.availability.end_inclusive
            else candidate.end < resolution.end
        )
        if candidate.start < resolution.start or not fits_end:
            raise ConflictError("Requested time is outside working hours")

        pad = timedelta(minutes=staff.buffer_minutes)
        span = day_span(target)
        bookings = active_bookings(await self.store.list_bookings(staff.id, span.start - pad, span.end + pad))
        if len([b for b in bookings if b.start_at.date() == target]) >= staff.max_bookings_per_day:
            raise ConflictError(f"Staff member {staff.id} is fully booked on {target.isoformat()}")

        conflicts = find_conflicts(candidate, resolution.breaks, bookings, staff.buffer_minutes)
        if conflicts:
            logger.warning(
                "Reservation conflict for staff %s at %s: %d overlapping interval(s)",
                staff.id, candidate.start, len(conflicts),
            )
            raise ConflictError("This time slot is no longer available")

