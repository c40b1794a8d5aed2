"""
Tests for scheduling/reservation.py

Atomic check-and-reserve, including concurrent requests for the same slot.
"""

import asyncio
import unittest
from datetime import datetime

from salon_booking.core.errors import BusyError, ConflictError, StaffNotFound, ValidationError
from salon_booking.models import BookingStatus
from salon_booking.repositories.memory import InMemoryStore
from salon_booking.scheduling.reservation import ReservationService, StaffLocks
from tests.factories import EARLY_MONDAY, add_staff, booking, fixed_clock, monday_only, seed_salon, time_off


def at(hour, minute=0):
    return datetime(2024, 9, 9, hour, minute)


class SlowStore(InMemoryStore):
    """Yields to the event loop mid-check so concurrent requests interleave."""

    async def list_bookings(self, staff_id, start, end):
        await asyncio.sleep(0)
        result = await super().list_bookings(staff_id, start, end)
        await asyncio.sleep(0)
        return result


class TestCheckAndReserve(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.store = InMemoryStore()
        self.business, self.staff, self.service = seed_salon(
            self.store, schedule=monday_only(breaks=[("12:00", "13:00")])
        )
        self.reservations = ReservationService(
            self.store, clock=fixed_clock(EARLY_MONDAY), locks=StaffLocks(), lock_timeout=1.0
        )

    async def reserve(self, start, staff_id=None):
        return await self.reservations.check_and_reserve(
            staff_id or self.staff.id, self.service.id, start, "Jane Doe", "jane@example.com"
        )

    async def test_success(self):
        created = await self.reserve(at(10))

        self.assertEqual(created.start_at, at(10))
        self.assertEqual(created.end_at, at(11))
        self.assertEqual(created.status, "confirmed")
        self.assertEqual(created.business_id, self.business.id)
        self.assertIn(created.id, self.store.bookings)
        self.assertEqual(self.store.commits, 1)

    async def test_overlap_rejected(self):
        await self.reserve(at(10))
        with self.assertRaises(ConflictError):
            await self.reserve(at(10, 30))
        self.assertEqual(len(self.store.bookings), 1)

    async def test_back_to_back_allowed(self):
        await self.reserve(at(10))
        await self.reserve(at(11))
        self.assertEqual(len(self.store.bookings), 2)

    async def test_break_rejected(self):
        with self.assertRaises(ConflictError):
            await self.reserve(at(11, 30))

    async def test_ending_at_break_allowed(self):
        created = await self.reserve(at(11))
        self.assertEqual(created.end_at, at(12))

    async def test_outside_working_hours(self):
        for start in (at(8), at(16), at(16, 30)):
            with self.assertRaises(ConflictError):
                await self.reserve(start)

    async def test_non_working_day(self):
        with self.assertRaises(ConflictError):
            await self.reserve(datetime(2024, 9, 10, 10, 0))

    async def test_time_off(self):
        self.store.add(time_off(self.business, self.staff.id, at(15), at(16)))
        with self.assertRaises(ConflictError):
            await self.reserve(at(10))

    async def test_past_start(self):
        with self.assertRaises(ValidationError):
            await self.reserve(datetime(2024, 9, 9, 6, 0))

    async def test_start_must_be_whole_minute(self):
        with self.assertRaises(ValidationError):
            await self.reserve(datetime(2024, 9, 9, 10, 0, 30))
        self.assertEqual(self.store.bookings, {})

    async def test_daily_cap(self):
        self.staff.max_bookings_per_day = 1
        await self.reserve(at(9))
        with self.assertRaises(ConflictError):
            await self.reserve(at(14))

    async def test_buffer_applies(self):
        self.staff.buffer_minutes = 15
        await self.reserve(at(9))
        with self.assertRaises(ConflictError):
            await self.reserve(at(10))
        await self.reserve(at(10, 15))

    async def test_cancelled_booking_does_not_block(self):
        self.store.add(booking(self.staff, self.service, at(10), at(11), status=BookingStatus.CANCELLED))
        created = await self.reserve(at(10))
        self.assertEqual(created.start_at, at(10))

    async def test_unknown_staff(self):
        with self.assertRaises(StaffNotFound):
            await self.reserve(at(10), staff_id="nope")

    async def test_store_failure_rolls_back(self):
        rollbacks = []

        async def failing_add(record):
            raise RuntimeError("disk full")

        async def track_rollback():
            rollbacks.append(True)

        self.store.add_booking = failing_add
        self.store.rollback = track_rollback

        with self.assertRaises(RuntimeError):
            await self.reserve(at(10))
        self.assertEqual(rollbacks, [True])
        self.assertEqual(self.store.commits, 0)


class TestConcurrentReservations(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.store = SlowStore()
        self.business, self.staff, self.service = seed_salon(self.store)
        self.locks = StaffLocks()

    def service_instance(self):
        return ReservationService(self.store, clock=fixed_clock(EARLY_MONDAY), locks=self.locks, lock_timeout=5.0)

    async def test_exactly_one_wins(self):
        attempts = [
            self.service_instance().check_and_reserve(self.staff.id, self.service.id, at(10), f"c{i}", "")
            for i in range(10)
        ]

        results = await asyncio.gather(*attempts, return_exceptions=True)

        created = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, Exception)]
        self.assertEqual(len(created), 1)
        self.assertTrue(all(isinstance(f, ConflictError) for f in failures))
        self.assertEqual(len(self.store.bookings), 1)

    async def test_overlapping_requests_never_both_succeed(self):
        starts = [at(10), at(10, 15), at(10, 30), at(10, 45), at(11), at(11, 15)]
        attempts = [
            self.service_instance().check_and_reserve(self.staff.id, self.service.id, s, "c", "")
            for s in starts
        ]

        await asyncio.gather(*attempts, return_exceptions=True)

        stored = sorted(self.store.bookings.values(), key=lambda b: b.start_at)
        for earlier, later in zip(stored, stored[1:]):
            self.assertLessEqual(earlier.end_at, later.start_at)
        self.assertEqual([b.start_at for b in stored], [at(10), at(11)])

    async def test_different_staff_do_not_contend(self):
        add_staff(self.store, self.service, "staff-2", self.staff.schedule)

        results = await asyncio.gather(
            self.service_instance().check_and_reserve("staff-1", self.service.id, at(10)),
            self.service_instance().check_and_reserve("staff-2", self.service.id, at(10)),
        )

        self.assertEqual({b.staff_id for b in results}, {"staff-1", "staff-2"})

    async def test_lock_wait_is_bounded(self):
        reservations = ReservationService(
            self.store, clock=fixed_clock(EARLY_MONDAY), locks=self.locks, lock_timeout=0.01
        )
        async with self.locks.hold(self.staff.id, 1.0):
            with self.assertRaises(BusyError):
                await reservations.check_and_reserve(self.staff.id, self.service.id, at(10))
        self.assertEqual(self.store.bookings, {})


if __name__ == "__main__":
    unittest.main()
