"""
Store contracts consumed by the scheduling engine.

The engine never touches a session or a global list directly; request
handlers hand it one of the implementations in this package.
"""

from collections.abc import Iterable
from datetime import date, datetime
from typing import Protocol

from salon_booking.models.booking import Booking
from salon_booking.models.business import Business
from salon_booking.models.service import Service
from salon_booking.models.staff import Staff
from salon_booking.models.time_off import TimeOff
from salon_booking.models.waitlist import WaitlistEntry


class ScheduleStore(Protocol):
    """Read side used by availability queries."""

    async def get_business(self, business_id: str) -> Business | None: ...

    async def get_staff(self, staff_id: str) -> Staff | None: ...

    async def get_service(self, service_id: str) -> Service | None: ...

    async def list_time_off(
        self, business_id: str, staff_id: str, start: datetime, end: datetime
    ) -> list[TimeOff]:
        """Entries for staff_id or the whole business intersecting [start, end)."""
        ...

    async def list_bookings(self, staff_id: str, start: datetime, end: datetime) -> list[Booking]:
        """Bookings of any status for staff_id intersecting [start, end)."""
        ...


class BookingStore(ScheduleStore, Protocol):
    """Write side used by reservations, cancellations and time-off management."""

    async def lock_staff(self, staff_id: str) -> None:
        """Serialize writers for one staff member until commit/rollback."""
        ...

    async def add_booking(self, booking: Booking) -> Booking: ...

    async def get_booking(self, booking_id: str) -> Booking | None: ...

    async def save_booking(self, booking: Booking) -> Booking: ...

    async def add_time_off(self, entry: TimeOff) -> TimeOff: ...

    async def get_time_off(self, time_off_id: str) -> TimeOff | None: ...

    async def delete_time_off(self, entry: TimeOff) -> None: ...

    async def list_business_time_off(self, business_id: str) -> list[TimeOff]: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class WaitlistStore(Protocol):
    async def list_waitlist(self, business_id: str, service_id: str, d: date) -> list[WaitlistEntry]:
        """Pending (not yet notified) entries for one business, service and day."""
        ...

    async def add_waitlist_entry(self, entry: WaitlistEntry) -> WaitlistEntry: ...

    async def mark_notified(self, entries: Iterable[WaitlistEntry], when: datetime) -> None: ...

    async def purge_waitlist_before(self, d: date) -> int: ...

    async def commit(self) -> None: ...
