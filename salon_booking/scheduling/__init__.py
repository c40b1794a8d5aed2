"""
Scheduling engine.

- Schedule resolution (resolver.py)
- Slot generation (slots.py)
- Conflict detection (conflicts.py)
- Availability queries (availability.py)
- Atomic reservations (reservation.py)
- Waitlist matching on cancellation (waitlist.py)
"""

from salon_booking.scheduling.availability import AvailabilityService
from salon_booking.scheduling.reservation import ReservationService, StaffLocks
from salon_booking.scheduling.resolver import Closed, OpenWindow, ScheduleResolver
from salon_booking.scheduling.waitlist import CancellationMatcher

__all__ = [
    "AvailabilityService",
    "ReservationService",
    "StaffLocks",
    "Closed",
    "OpenWindow",
    "ScheduleResolver",
    "CancellationMatcher",
]
