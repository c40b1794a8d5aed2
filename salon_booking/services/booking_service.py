import logging
from datetime import date

from salon_booking.core.clock import local_today
from salon_booking.core.db import async_session_maker
from salon_booking.core.errors import (
    BookingNotFound,
    BusinessNotFound,
    InvalidDate,
    ServiceNotFound,
    ValidationError,
)
from salon_booking.models.booking import Booking, BookingStatus
from salon_booking.models.waitlist import WaitlistEntry
from salon_booking.repositories.base import BookingStore, WaitlistStore
from salon_booking.repositories.sql import SqlStore
from salon_booking.scheduling.waitlist import CancellationMatcher
from salon_booking.services.email_service import notify_waitlist_by_email

logger = logging.getLogger(__name__)


async def cancel_booking(store: BookingStore, booking_id: str) -> Booking:
    booking = await store.get_booking(booking_id)
    if booking is None:
        raise BookingNotFound(booking_id)
    if not booking.is_active:
        raise ValidationError(f"Booking {booking_id} is {booking.status} and cannot be cancelled")
    booking.status = BookingStatus.CANCELLED.value
    await store.save_booking(booking)
    await store.commit()
    logger.info("Booking %s cancelled (staff %s, %s)", booking.id, booking.staff_id, booking.start_at)
    return booking


async def join_waitlist(
    store: BookingStore,
    waitlist: WaitlistStore,
    entry: WaitlistEntry,
    today: date | None = None,
) -> WaitlistEntry:
    today = today or local_today()
    if entry.date < today:
        raise InvalidDate("Cannot join the waitlist for a past date")
    business = await store.get_business(entry.business_id)
    if business is None or not business.is_active:
        raise BusinessNotFound(entry.business_id)
    service = await store.get_service(entry.service_id)
    if service is None or not service.is_active or service.business_id != entry.business_id:
        raise ServiceNotFound(entry.service_id)
    entry = await waitlist.add_waitlist_entry(entry)
    await waitlist.commit()
    logger.info("Waitlist entry %s added for service %s on %s", entry.id, entry.service_id, entry.date)
    return entry


async def purge_expired_waitlist(waitlist: WaitlistStore, today: date | None = None) -> int:
    """Drop entries whose target date has passed."""
    n = await waitlist.purge_waitlist_before(today or local_today())
    await waitlist.commit()
    return n


async def run_waitlist_matching(booking: Booking) -> None:
    """Background job after a cancellation; uses its own session since the request's is closed."""
    async with async_session_maker() as session:
        matcher = CancellationMatcher(SqlStore(session), notify=notify_waitlist_by_email)
        await matcher.on_booking_cancelled(booking)
