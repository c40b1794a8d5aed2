"""
Slot Generation

Proposes candidate start times inside a working window. Bookings and breaks
are not consulted here; see conflicts.py.
"""

from collections.abc import Iterator
from datetime import datetime, timedelta

from salon_booking.core.config import settings
from salon_booking.core.errors import ValidationError
from salon_booking.scheduling.resolver import OpenWindow
from salon_booking.scheduling.schedule import Interval


class SlotSequence:
    """Re-iterable, lazily generated candidate starts for one window.

    Starts at window.start and steps by step_minutes while the service still
    fits: it must end before window.end, or exactly at it when end_inclusive.
    """

    def __init__(
        self,
        window: OpenWindow | Interval,
        duration_minutes: int,
        step_minutes: int,
        end_inclusive: bool = False,
    ) -> None:
        if duration_minutes <= 0:
            raise ValidationError(f"Service duration must be positive, got {duration_minutes}")
        if step_minutes <= 0:
            raise ValidationError(f"Slot step must be positive, got {step_minutes}")
        self.start = window.start
        self.end = window.end
        self.duration = timedelta(minutes=duration_minutes)
        self.step = timedelta(minutes=step_minutes)
        self.end_inclusive = end_inclusive

    def _fits(self, slot_end: datetime) -> bool:
        if self.end_inclusive:
            return slot_end <= self.end
        return slot_end < self.end

    def __iter__(self) -> Iterator[datetime]:
        current = self.start
        while self._fits(current + self.duration):
            yield current
            current += self.step


def generate_slots(
    window: OpenWindow | Interval,
    duration_minutes: int,
    step_minutes: int | None = None,
    end_inclusive: bool | None = None,
) -> SlotSequence:
    return SlotSequence(
        window,
        duration_minutes,
        step_minutes if step_minutes is not None else settings.slot_step_minutes,
        end_inclusive if end_inclusive is not None else settings.slot_end_inclusive,
    )
