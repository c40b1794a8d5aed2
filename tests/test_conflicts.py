"""
Tests for scheduling/conflicts.py

Half-open overlap, breaks, booking statuses and buffer time.
"""

import unittest
from datetime import datetime

from salon_booking.models import BookingStatus, Service, Staff
from salon_booking.scheduling.conflicts import find_conflicts, is_slot_available, overlaps
from salon_booking.scheduling.schedule import Interval
from tests.factories import EARLY_MONDAY, booking


def at(hour, minute=0):
    return datetime(2024, 9, 9, hour, minute)


STAFF = Staff(id="staff-1", business_id="biz-1", full_name="Ana")
SERVICE = Service(id="svc-1", business_id="biz-1", name="Cut", duration_minutes=60)
LUNCH = Interval(at(12), at(13))


class TestOverlap(unittest.TestCase):

    def test_touching_is_not_overlap(self):
        self.assertFalse(overlaps(Interval(at(11), at(12)), Interval(at(12), at(13))))
        self.assertFalse(overlaps(Interval(at(13), at(14)), Interval(at(12), at(13))))

    def test_partial_overlap(self):
        self.assertTrue(overlaps(Interval(at(11, 30), at(12, 30)), Interval(at(12), at(13))))

    def test_containment(self):
        self.assertTrue(overlaps(Interval(at(9), at(17)), Interval(at(12), at(13))))
        self.assertTrue(overlaps(Interval(at(12, 15), at(12, 45)), Interval(at(12), at(13))))


class TestConflictChecker(unittest.TestCase):

    def test_free_slot(self):
        existing = [booking(STAFF, SERVICE, at(10), at(11))]
        self.assertTrue(is_slot_available(Interval(at(9), at(10)), [LUNCH], existing, EARLY_MONDAY))

    def test_break_conflict(self):
        self.assertFalse(is_slot_available(Interval(at(11, 30), at(12, 30)), [LUNCH], [], EARLY_MONDAY))

    def test_booking_conflict(self):
        existing = [booking(STAFF, SERVICE, at(10), at(11))]
        conflicts = find_conflicts(Interval(at(10, 30), at(11, 30)), [LUNCH], existing)
        self.assertEqual(conflicts, [Interval(at(10), at(11))])

    def test_cancelled_and_completed_bookings_ignored(self):
        existing = [
            booking(STAFF, SERVICE, at(10), at(11), status=BookingStatus.CANCELLED),
            booking(STAFF, SERVICE, at(10), at(11), status=BookingStatus.NO_SHOW),
            booking(STAFF, SERVICE, at(10), at(11), status=BookingStatus.COMPLETED),
        ]
        self.assertTrue(is_slot_available(Interval(at(10), at(11)), [], existing, EARLY_MONDAY))

    def test_pending_booking_blocks(self):
        existing = [booking(STAFF, SERVICE, at(10), at(11), status=BookingStatus.PENDING)]
        self.assertFalse(is_slot_available(Interval(at(10), at(11)), [], existing, EARLY_MONDAY))

    def test_buffer_widens_existing_bookings(self):
        existing = [booking(STAFF, SERVICE, at(10), at(11))]
        candidate = Interval(at(11), at(12))
        self.assertTrue(is_slot_available(candidate, [], existing, EARLY_MONDAY))
        self.assertFalse(is_slot_available(candidate, [], existing, EARLY_MONDAY, buffer_minutes=15))
        self.assertTrue(
            is_slot_available(Interval(at(11, 15), at(12, 15)), [], existing, EARLY_MONDAY, buffer_minutes=15)
        )

    def test_past_and_current_starts_unavailable(self):
        now = at(10)
        self.assertFalse(is_slot_available(Interval(at(9, 45), at(10, 45)), [], [], now))
        self.assertFalse(is_slot_available(Interval(at(10), at(11)), [], [], now))
        self.assertTrue(is_slot_available(Interval(at(10, 15), at(11, 15)), [], [], now))


if __name__ == "__main__":
    unittest.main()
