from datetime import datetime

from pydantic import BaseModel, Field


class BookRequest(BaseModel):
    staff_id: str
    service_id: str
    start_at: datetime
    customer_name: str = Field(default="", max_length=100)
    customer_contact: str = Field(default="", max_length=255)


class BookingPublic(BaseModel):
    id: str
    business_id: str
    staff_id: str
    service_id: str
    customer_name: str
    start_at: datetime
    end_at: datetime
    status: str
    created_at: datetime
