import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status

from salon_booking.api.deps import (
    CancellationHandler,
    get_cancellation_handler,
    get_reservation_service,
    get_store,
)
from salon_booking.api.schemas.booking import BookingPublic, BookRequest
from salon_booking.models.booking import Booking
from salon_booking.repositories.base import BookingStore
from salon_booking.scheduling.reservation import ReservationService
from salon_booking.services.booking_service import cancel_booking
from salon_booking.services.email_service import send_booking_confirmation_email

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/bookings", tags=["bookings"])


def _to_public(b: Booking) -> BookingPublic:
    return BookingPublic(
        id=b.id,
        business_id=b.business_id,
        staff_id=b.staff_id,
        service_id=b.service_id,
        customer_name=b.customer_name,
        start_at=b.start_at,
        end_at=b.end_at,
        status=b.status,
        created_at=b.created_at,
    )


@router.post("", response_model=BookingPublic, status_code=status.HTTP_201_CREATED)
async def book(
    body: BookRequest,
    background_tasks: BackgroundTasks,
    reservations: ReservationService = Depends(get_reservation_service),
) -> BookingPublic:
    """Reserve a slot atomically. start_at must be a whole minute.

    409 if it was taken meanwhile, 503 if the calendar is busy.
    """
    booking = await reservations.check_and_reserve(
        body.staff_id,
        body.service_id,
        body.start_at,
        customer_name=body.customer_name,
        customer_contact=body.customer_contact,
    )
    # Send confirmation email in background (uses sync SMTP)
    background_tasks.add_task(send_booking_confirmation_email, booking)
    return _to_public(booking)


@router.post("/{booking_id}/cancel", response_model=BookingPublic)
async def cancel(
    booking_id: str,
    background_tasks: BackgroundTasks,
    store: BookingStore = Depends(get_store),
    on_cancelled: CancellationHandler = Depends(get_cancellation_handler),
) -> BookingPublic:
    booking = await cancel_booking(store, booking_id)
    # Waitlist matching runs after the response; it never fails the cancellation
    background_tasks.add_task(on_cancelled, booking)
    return _to_public(booking)
