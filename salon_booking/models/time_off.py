from datetime import datetime

from sqlmodel import Field, SQLModel

from salon_booking.models._common import new_id

# staff_id value marking a business-wide closure
ALL_STAFF = "all"


class TimeOff(SQLModel, table=True):
    __tablename__ = "time_off"
    id: str = Field(default_factory=new_id, primary_key=True)
    business_id: str = Field(foreign_key="businesses.id", index=True)
    staff_id: str = Field(index=True)
    start_at: datetime = Field(index=True)
    end_at: datetime
    reason: str = ""
