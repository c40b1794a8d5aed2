from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from salon_booking.models._common import _utc_naive_now, new_id


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


# Statuses that hold a staff member's time; at most one per instant per staff
ACTIVE_STATUSES = frozenset({BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value})


class Booking(SQLModel, table=True):
    __tablename__ = "bookings"
    id: str = Field(default_factory=new_id, primary_key=True)
    business_id: str = Field(foreign_key="businesses.id", index=True)
    staff_id: str = Field(foreign_key="staff.id", index=True)
    service_id: str = Field(foreign_key="services.id", index=True)
    customer_name: str = ""
    customer_contact: str = ""
    # Business-local wall clock, naive
    start_at: datetime = Field(index=True)
    end_at: datetime
    status: str = Field(default=BookingStatus.CONFIRMED.value, max_length=20, index=True)
    created_at: datetime = Field(default_factory=_utc_naive_now)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
