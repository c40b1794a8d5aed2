"""In-process store with the same contract as SqlStore. Used by tests and local fakes."""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from salon_booking.core.errors import ConflictError
from salon_booking.models.booking import Booking
from salon_booking.models.business import Business
from salon_booking.models.service import Service
from salon_booking.models.staff import Staff
from salon_booking.models.time_off import ALL_STAFF, TimeOff
from salon_booking.models.waitlist import WaitlistEntry
from salon_booking.scheduling.conflicts import overlaps
from salon_booking.scheduling.schedule import Interval


class InMemoryStore:
    def __init__(self) -> None:
        self.businesses: dict[str, Business] = {}
        self.staff: dict[str, Staff] = {}
        self.services: dict[str, Service] = {}
        self.bookings: dict[str, Booking] = {}
        self.time_off: dict[str, TimeOff] = {}
        self.waitlist: dict[str, WaitlistEntry] = {}
        # (staff_id, start day) -> booking ids
        self._bookings_by_staff_day: dict[tuple[str, date], list[str]] = defaultdict(list)
        # (business_id, service_id, day) -> entry ids
        self._waitlist_by_key: dict[tuple[str, str, date], list[str]] = defaultdict(list)
        self.commits = 0

    # Seeding helpers
    def add(self, *records: Business | Staff | Service | Booking | TimeOff | WaitlistEntry) -> None:
        for record in records:
            if isinstance(record, Business):
                self.businesses[record.id] = record
            elif isinstance(record, Staff):
                self.staff[record.id] = record
            elif isinstance(record, Service):
                self.services[record.id] = record
            elif isinstance(record, Booking):
                self._index_booking(record)
            elif isinstance(record, TimeOff):
                self.time_off[record.id] = record
            elif isinstance(record, WaitlistEntry):
                self._index_waitlist(record)
            else:
                raise TypeError(f"Unsupported record type {type(record).__name__}")

    def _index_booking(self, booking: Booking) -> None:
        self.bookings[booking.id] = booking
        self._bookings_by_staff_day[(booking.staff_id, booking.start_at.date())].append(booking.id)

    def _index_waitlist(self, entry: WaitlistEntry) -> None:
        self.waitlist[entry.id] = entry
        self._waitlist_by_key[(entry.business_id, entry.service_id, entry.date)].append(entry.id)

    # ScheduleStore
    async def get_business(self, business_id: str) -> Business | None:
        return self.businesses.get(business_id)

    async def get_staff(self, staff_id: str) -> Staff | None:
        return self.staff.get(staff_id)

    async def get_service(self, service_id: str) -> Service | None:
        return self.services.get(service_id)

    async def list_time_off(
        self, business_id: str, staff_id: str, start: datetime, end: datetime
    ) -> list[TimeOff]:
        span = Interval(start, end)
        return [
            t
            for t in self.time_off.values()
            if t.business_id == business_id
            and t.staff_id in (staff_id, ALL_STAFF)
            and overlaps(Interval(t.start_at, t.end_at), span)
        ]

    async def list_bookings(self, staff_id: str, start: datetime, end: datetime) -> list[Booking]:
        span = Interval(start, end)
        found: list[Booking] = []
        # Bookings never span midnight, so one day back covers anything reaching into the range
        day = start.date() - timedelta(days=1)
        while day <= end.date():
            for booking_id in self._bookings_by_staff_day.get((staff_id, day), ()):
                booking = self.bookings[booking_id]
                if overlaps(Interval(booking.start_at, booking.end_at), span):
                    found.append(booking)
            day += timedelta(days=1)
        return sorted(found, key=lambda b: b.start_at)

    # BookingStore
    async def lock_staff(self, staff_id: str) -> None:
        # Writers are already serialized by the reservation lock in this process
        return None

    async def add_booking(self, booking: Booking) -> Booking:
        if booking.is_active:
            same_day = await self.list_bookings(booking.staff_id, booking.start_at, booking.end_at)
            if any(b.is_active and b.id != booking.id for b in same_day):
                raise ConflictError("Booking overlaps an existing booking for this staff member")
        self._index_booking(booking)
        return booking

    async def get_booking(self, booking_id: str) -> Booking | None:
        return self.bookings.get(booking_id)

    async def save_booking(self, booking: Booking) -> Booking:
        self.bookings[booking.id] = booking
        return booking

    async def add_time_off(self, entry: TimeOff) -> TimeOff:
        self.time_off[entry.id] = entry
        return entry

    async def get_time_off(self, time_off_id: str) -> TimeOff | None:
        return self.time_off.get(time_off_id)

    async def delete_time_off(self, entry: TimeOff) -> None:
        self.time_off.pop(entry.id, None)

    async def list_business_time_off(self, business_id: str) -> list[TimeOff]:
        return sorted(
            (t for t in self.time_off.values() if t.business_id == business_id),
            key=lambda t: t.start_at,
        )

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        return None

    # WaitlistStore
    async def list_waitlist(self, business_id: str, service_id: str, d: date) -> list[WaitlistEntry]:
        ids = self._waitlist_by_key.get((business_id, service_id, d), ())
        return [self.waitlist[i] for i in ids if i in self.waitlist and self.waitlist[i].notified_at is None]

    async def add_waitlist_entry(self, entry: WaitlistEntry) -> WaitlistEntry:
        self._index_waitlist(entry)
        return entry

    async def mark_notified(self, entries: Iterable[WaitlistEntry], when: datetime) -> None:
        for entry in entries:
            entry.notified_at = when

    async def purge_waitlist_before(self, d: date) -> int:
        expired = [e for e in self.waitlist.values() if e.date < d]
        for entry in expired:
            del self.waitlist[entry.id]
            self._waitlist_by_key[(entry.business_id, entry.service_id, entry.date)].remove(entry.id)
        return len(expired)
