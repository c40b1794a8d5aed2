from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from salon_booking.models._common import new_id


class Business(SQLModel, table=True):
    __tablename__ = "businesses"
    id: str = Field(default_factory=new_id, primary_key=True)
    name: str
    # WeeklySchedule JSON; None means the business imposes no operating hours
    hours: dict[str, Any] | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    is_active: bool = True
