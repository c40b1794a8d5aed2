"""Builders for records used across the test modules."""

from datetime import date, datetime

from salon_booking.models import Booking, BookingStatus, Business, Service, Staff, TimeOff, WaitlistEntry
from salon_booking.repositories.memory import InMemoryStore

# 2024-09-09 is a Monday
MONDAY = date(2024, 9, 9)
EARLY_MONDAY = datetime(2024, 9, 9, 7, 0)


def fixed_clock(now: datetime = EARLY_MONDAY):
    return lambda: now


def day(start: str = "09:00", end: str = "17:00", breaks: list[tuple[str, str]] | None = None) -> dict:
    return {
        "is_working": True,
        "start_time": start,
        "end_time": end,
        "breaks": [{"start_time": s, "end_time": e} for s, e in (breaks or [])],
    }


def monday_only(**kwargs) -> dict:
    return {"monday": day(**kwargs)}


def every_day(**kwargs) -> dict:
    return {name: day(**kwargs) for name in
            ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")}


def seed_salon(
    store: InMemoryStore,
    schedule: dict | None = None,
    duration_minutes: int = 60,
    business_hours: dict | None = None,
    buffer_minutes: int = 0,
    max_bookings_per_day: int = 20,
    staff_id: str = "staff-1",
) -> tuple[Business, Staff, Service]:
    business = Business(id="biz-1", name="Glow Studio", hours=business_hours)
    staff = Staff(
        id=staff_id,
        business_id=business.id,
        full_name="Ana Stylist",
        skills=["color"],
        schedule=schedule if schedule is not None else monday_only(),
        buffer_minutes=buffer_minutes,
        max_bookings_per_day=max_bookings_per_day,
    )
    service = Service(
        id="svc-1",
        business_id=business.id,
        name="Cut & Style",
        duration_minutes=duration_minutes,
        staff_ids=[staff.id],
    )
    store.add(business, staff, service)
    return business, staff, service


def add_staff(store: InMemoryStore, service: Service, staff_id: str, schedule: dict, **kwargs) -> Staff:
    staff = Staff(id=staff_id, business_id=service.business_id, full_name=staff_id, schedule=schedule, **kwargs)
    store.add(staff)
    service.staff_ids.append(staff_id)
    return staff


def booking(
    staff: Staff,
    service: Service,
    start: datetime,
    end: datetime,
    status: BookingStatus = BookingStatus.CONFIRMED,
    booking_id: str | None = None,
) -> Booking:
    record = Booking(
        business_id=service.business_id,
        staff_id=staff.id,
        service_id=service.id,
        customer_name="Existing Customer",
        customer_contact="existing@example.com",
        start_at=start,
        end_at=end,
        status=status.value,
    )
    if booking_id:
        record.id = booking_id
    return record


def time_off(business: Business, staff_id: str, start: datetime, end: datetime) -> TimeOff:
    return TimeOff(business_id=business.id, staff_id=staff_id, start_at=start, end_at=end, reason="vacation")


def waitlist_entry(
    business_id: str,
    service_id: str,
    d: date,
    preferred: str = "any",
    contact: str = "waiting@example.com",
) -> WaitlistEntry:
    return WaitlistEntry(
        business_id=business_id,
        service_id=service_id,
        date=d,
        preferred_time_range=preferred,
        customer_name="Waiting Customer",
        customer_contact=contact,
    )
