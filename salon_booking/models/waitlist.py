import datetime as dt
from enum import Enum

from sqlmodel import Field, SQLModel

from salon_booking.models._common import _utc_naive_now, new_id


class TimeRange(str, Enum):
    ANY = "any"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class WaitlistEntry(SQLModel, table=True):
    __tablename__ = "waitlist_entries"
    id: str = Field(default_factory=new_id, primary_key=True)
    business_id: str = Field(foreign_key="businesses.id", index=True)
    service_id: str = Field(foreign_key="services.id", index=True)
    customer_name: str = ""
    customer_contact: str
    date: dt.date = Field(index=True)
    preferred_time_range: str = Field(default=TimeRange.ANY.value, max_length=20)
    created_at: dt.datetime = Field(default_factory=_utc_naive_now)
    # Set once the customer has been told about a freed slot; pending while None
    notified_at: dt.datetime | None = None
