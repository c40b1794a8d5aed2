import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from salon_booking.core.config import settings
from salon_booking.core.errors import BusyError, ConflictError
from salon_booking.models.booking import Booking
from salon_booking.models.business import Business
from salon_booking.models.service import Service
from salon_booking.models.staff import Staff
from salon_booking.models.time_off import ALL_STAFF, TimeOff
from salon_booking.models.waitlist import WaitlistEntry

logger = logging.getLogger(__name__)

# Postgres lock_not_available, raised when SET LOCAL lock_timeout expires
LOCK_NOT_AVAILABLE = "55P03"


def _is_lock_timeout(exc: DBAPIError) -> bool:
    # asyncpg's adapter exposes sqlstate, psycopg2 exposes pgcode
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code == LOCK_NOT_AVAILABLE


class SqlStore:
    """Store backed by one AsyncSession; implements every contract in repositories.base."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_business(self, business_id: str) -> Business | None:
        return await self.session.get(Business, business_id)

    async def get_staff(self, staff_id: str) -> Staff | None:
        return await self.session.get(Staff, staff_id)

    async def get_service(self, service_id: str) -> Service | None:
        return await self.session.get(Service, service_id)

    async def list_time_off(
        self, business_id: str, staff_id: str, start: datetime, end: datetime
    ) -> list[TimeOff]:
        result = await self.session.execute(
            select(TimeOff).where(
                TimeOff.business_id == business_id,
                TimeOff.staff_id.in_([staff_id, ALL_STAFF]),
                TimeOff.start_at < end,
                TimeOff.end_at > start,
            )
        )
        return list(result.scalars().all())

    async def list_bookings(self, staff_id: str, start: datetime, end: datetime) -> list[Booking]:
        result = await self.session.execute(
            select(Booking)
            .where(
                Booking.staff_id == staff_id,
                # start_at is indexed; bookings never exceed one day
                Booking.start_at >= start - timedelta(days=1),
                Booking.start_at < end,
                Booking.end_at > start,
            )
            .order_by(Booking.start_at)
        )
        return list(result.scalars().all())

    async def lock_staff(self, staff_id: str) -> None:
        if self.session.bind is not None and self.session.bind.dialect.name == "postgresql":
            timeout_ms = int(settings.reservation_lock_timeout_seconds * 1000)
            await self.session.execute(text(f"SET LOCAL lock_timeout = {timeout_ms}"))
        try:
            await self.session.execute(select(Staff.id).where(Staff.id == staff_id).with_for_update())
        except DBAPIError as exc:
            if not _is_lock_timeout(exc):
                raise
            logger.warning("Row lock on staff %s timed out: %s", staff_id, exc.orig)
            raise BusyError("Staff calendar is busy, please retry") from exc

    async def add_booking(self, booking: Booking) -> Booking:
        self.session.add(booking)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            # The overlap exclusion constraint is the last line against double booking
            await self.session.rollback()
            raise ConflictError("Booking overlaps an existing booking for this staff member") from exc
        await self.session.refresh(booking)
        return booking

    async def get_booking(self, booking_id: str) -> Booking | None:
        return await self.session.get(Booking, booking_id)

    async def save_booking(self, booking: Booking) -> Booking:
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def add_time_off(self, entry: TimeOff) -> TimeOff:
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def get_time_off(self, time_off_id: str) -> TimeOff | None:
        return await self.session.get(TimeOff, time_off_id)

    async def delete_time_off(self, entry: TimeOff) -> None:
        await self.session.delete(entry)
        await self.session.flush()

    async def list_business_time_off(self, business_id: str) -> list[TimeOff]:
        result = await self.session.execute(
            select(TimeOff).where(TimeOff.business_id == business_id).order_by(TimeOff.start_at)
        )
        return list(result.scalars().all())

    async def list_waitlist(self, business_id: str, service_id: str, d: date) -> list[WaitlistEntry]:
        result = await self.session.execute(
            select(WaitlistEntry)
            .where(
                WaitlistEntry.business_id == business_id,
                WaitlistEntry.service_id == service_id,
                WaitlistEntry.date == d,
                WaitlistEntry.notified_at.is_(None),
            )
            .order_by(WaitlistEntry.created_at)
        )
        return list(result.scalars().all())

    async def add_waitlist_entry(self, entry: WaitlistEntry) -> WaitlistEntry:
        self.session.add(entry)
        await self.session.flush()
        await self.session.refresh(entry)
        return entry

    async def mark_notified(self, entries: Iterable[WaitlistEntry], when: datetime) -> None:
        ids = [e.id for e in entries]
        if not ids:
            return
        await self.session.execute(
            update(WaitlistEntry).where(WaitlistEntry.id.in_(ids)).values(notified_at=when)
        )
        await self.session.flush()

    async def purge_waitlist_before(self, d: date) -> int:
        result = await self.session.execute(delete(WaitlistEntry).where(WaitlistEntry.date < d))
        await self.session.flush()
        return result.rowcount or 0

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
