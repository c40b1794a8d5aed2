"""
Weekly schedule records.

Staff schedules and business operating hours share one shape: a mapping from
weekday name to a DaySchedule with "HH:MM" bounds and an ordered list of breaks.
They are stored as JSON on the owning row and validated here when loaded.
"""

from datetime import date, datetime, time
from typing import NamedTuple

from pydantic import BaseModel, Field, model_validator

TIME_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class Interval(NamedTuple):
    start: datetime
    end: datetime


def parse_hhmm(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def weekday_name(d: date) -> str:
    return WEEKDAYS[d.weekday()]


class Break(BaseModel):
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)

    @model_validator(mode="after")
    def _check_order(self) -> "Break":
        if parse_hhmm(self.start_time) >= parse_hhmm(self.end_time):
            raise ValueError(f"break {self.start_time}-{self.end_time} must end after it starts")
        return self

    def on(self, d: date) -> Interval:
        return Interval(
            datetime.combine(d, parse_hhmm(self.start_time)),
            datetime.combine(d, parse_hhmm(self.end_time)),
        )


class DaySchedule(BaseModel):
    is_working: bool = False
    start_time: str = Field(default="09:00", pattern=TIME_PATTERN)
    end_time: str = Field(default="17:00", pattern=TIME_PATTERN)
    breaks: list[Break] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_breaks(self) -> "DaySchedule":
        # Bounds and breaks only matter on working days
        if not self.is_working:
            return self
        start = parse_hhmm(self.start_time)
        end = parse_hhmm(self.end_time)
        if start >= end:
            raise ValueError(f"working hours {self.start_time}-{self.end_time} must end after they start")
        ordered = sorted(self.breaks, key=lambda b: parse_hhmm(b.start_time))
        previous_end: time | None = None
        for brk in ordered:
            brk_start = parse_hhmm(brk.start_time)
            brk_end = parse_hhmm(brk.end_time)
            if brk_start < start or brk_end > end:
                raise ValueError(
                    f"break {brk.start_time}-{brk.end_time} is outside working hours "
                    f"{self.start_time}-{self.end_time}"
                )
            if previous_end is not None and brk_start < previous_end:
                raise ValueError(f"break {brk.start_time}-{brk.end_time} overlaps another break")
            previous_end = brk_end
        self.breaks = ordered
        return self

    def window_on(self, d: date) -> Interval:
        return Interval(
            datetime.combine(d, parse_hhmm(self.start_time)),
            datetime.combine(d, parse_hhmm(self.end_time)),
        )


class WeeklySchedule(BaseModel):
    monday: DaySchedule = Field(default_factory=DaySchedule)
    tuesday: DaySchedule = Field(default_factory=DaySchedule)
    wednesday: DaySchedule = Field(default_factory=DaySchedule)
    thursday: DaySchedule = Field(default_factory=DaySchedule)
    friday: DaySchedule = Field(default_factory=DaySchedule)
    saturday: DaySchedule = Field(default_factory=DaySchedule)
    sunday: DaySchedule = Field(default_factory=DaySchedule)

    def for_day(self, d: date) -> DaySchedule:
        return getattr(self, weekday_name(d))
