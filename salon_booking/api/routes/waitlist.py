from fastapi import APIRouter, Depends, status

from salon_booking.api.deps import get_store
from salon_booking.api.schemas.waitlist import JoinWaitlistRequest, WaitlistEntryPublic
from salon_booking.models.waitlist import WaitlistEntry
from salon_booking.repositories.sql import SqlStore
from salon_booking.services.booking_service import join_waitlist

router = APIRouter(prefix="/waitlist", tags=["waitlist"])


@router.post("", response_model=WaitlistEntryPublic, status_code=status.HTTP_201_CREATED)
async def join(
    body: JoinWaitlistRequest,
    store: SqlStore = Depends(get_store),
) -> WaitlistEntryPublic:
    """Ask to be told when a matching slot frees up."""
    entry = WaitlistEntry(
        business_id=body.business_id,
        service_id=body.service_id,
        date=body.date,
        preferred_time_range=body.preferred_time_range.value,
        customer_name=body.customer_name,
        customer_contact=body.customer_contact,
    )
    entry = await join_waitlist(store, store, entry)
    return WaitlistEntryPublic(
        id=entry.id,
        business_id=entry.business_id,
        service_id=entry.service_id,
        date=entry.date,
        preferred_time_range=entry.preferred_time_range,
        created_at=entry.created_at,
    )
