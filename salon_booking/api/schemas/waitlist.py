import datetime as dt

from pydantic import BaseModel, Field

from salon_booking.models.waitlist import TimeRange


class JoinWaitlistRequest(BaseModel):
    business_id: str
    service_id: str
    date: dt.date
    preferred_time_range: TimeRange = TimeRange.ANY
    customer_name: str = Field(default="", max_length=100)
    customer_contact: str = Field(min_length=3, max_length=255)


class WaitlistEntryPublic(BaseModel):
    id: str
    business_id: str
    service_id: str
    date: dt.date
    preferred_time_range: str
    created_at: dt.datetime
