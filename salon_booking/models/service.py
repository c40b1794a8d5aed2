from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from salon_booking.models._common import new_id

MIN_DURATION_MINUTES = 15
MAX_DURATION_MINUTES = 480


class Service(SQLModel, table=True):
    __tablename__ = "services"
    id: str = Field(default_factory=new_id, primary_key=True)
    business_id: str = Field(foreign_key="businesses.id", index=True)
    name: str
    duration_minutes: int = Field(ge=MIN_DURATION_MINUTES, le=MAX_DURATION_MINUTES)
    staff_ids: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    required_skill: str | None = None
    is_active: bool = True
