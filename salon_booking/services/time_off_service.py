import logging

from salon_booking.core.errors import BusinessNotFound, StaffNotFound, TimeOffNotFound, ValidationError
from salon_booking.models.time_off import ALL_STAFF, TimeOff
from salon_booking.repositories.base import BookingStore

logger = logging.getLogger(__name__)


async def create_time_off(store: BookingStore, entry: TimeOff) -> TimeOff:
    if entry.start_at >= entry.end_at:
        raise ValidationError("Time-off must end after it starts")
    business = await store.get_business(entry.business_id)
    if business is None:
        raise BusinessNotFound(entry.business_id)
    if entry.staff_id != ALL_STAFF:
        staff = await store.get_staff(entry.staff_id)
        if staff is None or staff.business_id != entry.business_id:
            raise StaffNotFound(entry.staff_id)
    entry = await store.add_time_off(entry)
    await store.commit()
    logger.info(
        "Time-off %s for %s at business %s: %s - %s",
        entry.id, entry.staff_id, entry.business_id, entry.start_at, entry.end_at,
    )
    return entry


async def list_time_off(store: BookingStore, business_id: str) -> list[TimeOff]:
    if await store.get_business(business_id) is None:
        raise BusinessNotFound(business_id)
    return await store.list_business_time_off(business_id)


async def delete_time_off(store: BookingStore, time_off_id: str) -> None:
    entry = await store.get_time_off(time_off_id)
    if entry is None:
        raise TimeOffNotFound(time_off_id)
    await store.delete_time_off(entry)
    await store.commit()
