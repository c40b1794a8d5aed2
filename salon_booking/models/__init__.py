from salon_booking.models.business import Business
from salon_booking.models.staff import Staff
from salon_booking.models.service import Service
from salon_booking.models.booking import ACTIVE_STATUSES, Booking, BookingStatus
from salon_booking.models.time_off import ALL_STAFF, TimeOff
from salon_booking.models.waitlist import TimeRange, WaitlistEntry

__all__ = [
    "Business",
    "Staff",
    "Service",
    "Booking",
    "BookingStatus",
    "ACTIVE_STATUSES",
    "TimeOff",
    "ALL_STAFF",
    "TimeRange",
    "WaitlistEntry",
]
