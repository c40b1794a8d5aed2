from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from salon_booking.models._common import new_id


class Staff(SQLModel, table=True):
    __tablename__ = "staff"
    id: str = Field(default_factory=new_id, primary_key=True)
    business_id: str = Field(foreign_key="businesses.id", index=True)
    full_name: str
    email: str | None = None
    skills: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    schedule: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    # Gap kept free on each side of an existing booking
    buffer_minutes: int = 0
    max_bookings_per_day: int = 20
    is_active: bool = True
