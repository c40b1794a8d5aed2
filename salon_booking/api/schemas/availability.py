from datetime import datetime

from pydantic import BaseModel


class StaffSlotsResponse(BaseModel):
    date: str  # YYYY-MM-DD
    staff_id: str
    service_id: str
    slots: list[str]  # "HH:MM", ascending


class CombinedAvailabilityResponse(BaseModel):
    date: str
    service_id: str
    availability: dict[str, list[str]]  # staff_id -> slots; staff without slots omitted


class BreakInfo(BaseModel):
    start: datetime
    end: datetime


class ScheduleResponse(BaseModel):
    date: str
    staff_id: str
    is_open: bool
    reason: str | None = None
    start: datetime | None = None
    end: datetime | None = None
    breaks: list[BreakInfo] = []
