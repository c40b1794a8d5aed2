from collections.abc import Awaitable, Callable

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from salon_booking.core.db import get_session
from salon_booking.models.booking import Booking
from salon_booking.repositories.sql import SqlStore
from salon_booking.scheduling.availability import AvailabilityService
from salon_booking.scheduling.reservation import ReservationService
from salon_booking.scheduling.resolver import ScheduleResolver
from salon_booking.services.booking_service import run_waitlist_matching

CancellationHandler = Callable[[Booking], Awaitable[None]]


async def get_store(session: AsyncSession = Depends(get_session)) -> SqlStore:
    return SqlStore(session)


def get_availability_service(store: SqlStore = Depends(get_store)) -> AvailabilityService:
    return AvailabilityService(store)


def get_schedule_resolver(store: SqlStore = Depends(get_store)) -> ScheduleResolver:
    return ScheduleResolver(store)


def get_reservation_service(store: SqlStore = Depends(get_store)) -> ReservationService:
    return ReservationService(store)


def get_cancellation_handler() -> CancellationHandler:
    """Job run after a cancellation response is sent."""
    return run_waitlist_matching
