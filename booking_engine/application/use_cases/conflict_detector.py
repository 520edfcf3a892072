from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable

from booking_engine.application.utils.calendar_math import (
    intervals_overlap,
    time_to_minutes,
    window_covers,
)
from booking_engine.domain.entities.availability_window import AvailabilityWindow
from booking_engine.domain.entities.booking import Booking
from booking_engine.domain.entities.rejection import RejectionReason


@dataclass(frozen=True)
class SlotDecision:
    available: bool
    reason: RejectionReason | None = None
    conflicts: tuple[Booking, ...] = ()  # blocking bookings, set for OVERLAPS_BOOKING only


AVAILABLE = SlotDecision(True)


def evaluate_slot(
    slot_date: date,
    start_time: time,
    duration_minutes: int,
    windows: Iterable[AvailabilityWindow],
    occupying_bookings: Iterable[Booking],
    now: datetime,
    min_lead_minutes: int = 0,
) -> SlotDecision:
    """
    Decide whether a candidate slot can be booked.

    Checks run in a fixed order: working hours, then existing bookings, then
    the lead time relative to `now`. The slot is read in `now`'s timezone.
    Bookings that no longer occupy time are ignored even if passed in. An
    OVERLAPS_BOOKING decision carries every booking that blocks the slot.
    """
    start_minute = time_to_minutes(start_time)
    end_minute = start_minute + duration_minutes

    if not any(w.is_active and window_covers(w, start_minute, end_minute) for w in windows):
        return SlotDecision(False, RejectionReason.OUTSIDE_HOURS)

    conflicts = tuple(
        b
        for b in occupying_bookings
        if b.booking_date == slot_date
        and b.is_occupying
        and intervals_overlap(start_minute, end_minute, b.start_minute, b.end_minute)
    )
    if conflicts:
        return SlotDecision(False, RejectionReason.OVERLAPS_BOOKING, conflicts)

    slot_start = datetime.combine(slot_date, start_time, tzinfo=now.tzinfo)
    if slot_start < now + timedelta(minutes=min_lead_minutes):
        return SlotDecision(False, RejectionReason.IN_PAST)

    return AVAILABLE
