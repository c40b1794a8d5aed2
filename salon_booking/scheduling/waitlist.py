"""
Waitlist matching on cancellation.

When a booking is cancelled, customers waiting for the same business, service
and day are told about the freed slot if their preferred part of the day fits
the booking's start hour. Fan-out is bounded and notified entries are consumed
(marked notified) so a customer is only told once.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from salon_booking.core.clock import Clock, local_now
from salon_booking.core.config import settings
from salon_booking.models.booking import Booking, BookingStatus
from salon_booking.models.waitlist import TimeRange, WaitlistEntry
from salon_booking.repositories.base import WaitlistStore

logger = logging.getLogger(__name__)

# Hour buckets, [start, end)
TIME_RANGE_HOURS: dict[TimeRange, tuple[int, int]] = {
    TimeRange.MORNING: (8, 12),
    TimeRange.AFTERNOON: (12, 17),
    TimeRange.EVENING: (17, 22),
}

Notifier = Callable[[str, Booking], Awaitable[Any] | Any]


def time_range_for_hour(hour: int) -> TimeRange | None:
    for time_range, (start, end) in TIME_RANGE_HOURS.items():
        if start <= hour < end:
            return time_range
    return None


def entry_matches(entry: WaitlistEntry, booking: Booking) -> bool:
    if entry.business_id != booking.business_id or entry.service_id != booking.service_id:
        return False
    if entry.date != booking.start_at.date():
        return False
    if entry.preferred_time_range == TimeRange.ANY:
        return True
    return entry.preferred_time_range == time_range_for_hour(booking.start_at.hour)


def match_waitlist(booking: Booking, entries: Iterable[WaitlistEntry], limit: int) -> list[WaitlistEntry]:
    matches = [e for e in entries if entry_matches(e, booking)]
    return matches[:limit]


class CancellationMatcher:
    def __init__(
        self,
        store: WaitlistStore,
        notify: Notifier,
        limit: int | None = None,
        clock: Clock = local_now,
    ) -> None:
        self.store = store
        self.notify = notify
        self.limit = limit if limit is not None else settings.waitlist_notify_limit
        self.clock = clock

    async def on_booking_cancelled(self, booking: Booking) -> list[WaitlistEntry]:
        """Notify matching waitlist entries; never raises."""
        try:
            return await self._match_and_notify(booking)
        except Exception:
            logger.exception("Waitlist matching failed for cancelled booking %s", booking.id)
            return []

    async def _match_and_notify(self, booking: Booking) -> list[WaitlistEntry]:
        if booking.status != BookingStatus.CANCELLED:
            logger.warning("Booking %s is %s, not cancelled; skipping waitlist", booking.id, booking.status)
            return []

        entries = await self.store.list_waitlist(booking.business_id, booking.service_id, booking.start_at.date())
        matches = match_waitlist(booking, entries, self.limit)
        logger.info("Found %d waitlist match(es) for cancelled booking %s", len(matches), booking.id)

        notified: list[WaitlistEntry] = []
        for entry in matches:
            try:
                result = self.notify(entry.customer_contact, booking)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Failed to notify waitlist entry %s", entry.id)
                continue
            notified.append(entry)

        if notified:
            await self.store.mark_notified(notified, self.clock())
            await self.store.commit()
        return notified
