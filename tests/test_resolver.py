"""
Tests for scheduling/resolver.py

Weekly schedule lookup, time-off closures and business hours.
"""

import unittest
from datetime import datetime

from salon_booking.core.errors import StaffNotFound
from salon_booking.models import ALL_STAFF, Business
from salon_booking.repositories.memory import InMemoryStore
from salon_booking.scheduling.resolver import (
    BUSINESS_CLOSED,
    NOT_WORKING,
    TIME_OFF,
    Closed,
    OpenWindow,
    ScheduleResolver,
)
from salon_booking.scheduling.schedule import Interval
from tests.factories import MONDAY, day, every_day, monday_only, seed_salon, time_off


class TestScheduleResolver(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.store = InMemoryStore()
        self.business, self.staff, self.service = seed_salon(
            self.store, schedule=monday_only(breaks=[("12:00", "13:00")])
        )
        self.resolver = ScheduleResolver(self.store)

    async def test_open_day_returns_window_and_breaks(self):
        result = await self.resolver.resolve_schedule(self.staff.id, MONDAY)

        self.assertIsInstance(result, OpenWindow)
        self.assertEqual(result.start, datetime(2024, 9, 9, 9, 0))
        self.assertEqual(result.end, datetime(2024, 9, 9, 17, 0))
        self.assertEqual(
            result.breaks,
            (Interval(datetime(2024, 9, 9, 12, 0), datetime(2024, 9, 9, 13, 0)),),
        )

    async def test_non_working_weekday_is_closed(self):
        result = await self.resolver.resolve_schedule(self.staff.id, MONDAY.replace(day=10))
        self.assertEqual(result, Closed(NOT_WORKING))

    async def test_partial_time_off_closes_whole_day(self):
        """Even one hour of time-off removes the entire day."""
        self.store.add(time_off(self.business, self.staff.id, datetime(2024, 9, 9, 15, 0), datetime(2024, 9, 9, 16, 0)))

        result = await self.resolver.resolve_schedule(self.staff.id, MONDAY)

        self.assertEqual(result, Closed(TIME_OFF))

    async def test_multi_day_time_off_closes_day(self):
        self.store.add(time_off(self.business, self.staff.id, datetime(2024, 9, 6, 0, 0), datetime(2024, 9, 12, 0, 0)))
        result = await self.resolver.resolve_schedule(self.staff.id, MONDAY)
        self.assertEqual(result, Closed(TIME_OFF))

    async def test_time_off_ending_at_midnight_does_not_touch_next_day(self):
        self.store.add(time_off(self.business, self.staff.id, datetime(2024, 9, 8, 10, 0), datetime(2024, 9, 9, 0, 0)))
        result = await self.resolver.resolve_schedule(self.staff.id, MONDAY)
        self.assertIsInstance(result, OpenWindow)

    async def test_business_wide_time_off_closes_day(self):
        self.store.add(time_off(self.business, ALL_STAFF, datetime(2024, 9, 9, 8, 0), datetime(2024, 9, 9, 10, 0)))
        result = await self.resolver.resolve_schedule(self.staff.id, MONDAY)
        self.assertEqual(result, Closed(TIME_OFF))

    async def test_other_staff_time_off_ignored(self):
        self.store.add(time_off(self.business, "someone-else", datetime(2024, 9, 9, 8, 0), datetime(2024, 9, 9, 18, 0)))
        other = Business(id="biz-2", name="Elsewhere")
        self.store.add(other, time_off(other, ALL_STAFF, datetime(2024, 9, 9, 8, 0), datetime(2024, 9, 9, 18, 0)))

        result = await self.resolver.resolve_schedule(self.staff.id, MONDAY)

        self.assertIsInstance(result, OpenWindow)

    async def test_business_closed_weekday(self):
        self.business.hours = {"tuesday": day()}
        result = await self.resolver.resolve_schedule(self.staff.id, MONDAY)
        self.assertEqual(result, Closed(BUSINESS_CLOSED))

    async def test_window_clipped_to_business_hours(self):
        self.business.hours = every_day(start="10:00", end="16:00")
        result = await self.resolver.resolve_schedule(self.staff.id, MONDAY)
        self.assertEqual(result.start, datetime(2024, 9, 9, 10, 0))
        self.assertEqual(result.end, datetime(2024, 9, 9, 16, 0))

    async def test_unknown_staff(self):
        with self.assertRaises(StaffNotFound):
            await self.resolver.resolve_schedule("nobody", MONDAY)

    async def test_inactive_staff(self):
        self.staff.is_active = False
        with self.assertRaises(StaffNotFound):
            await self.resolver.resolve_schedule(self.staff.id, MONDAY)


if __name__ == "__main__":
    unittest.main()
