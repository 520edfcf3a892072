from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time

from booking_engine.domain.entities.rejection import RejectionReason


@dataclass(frozen=True)
class TimeSlot:
    date: date
    start_time: time
    duration_minutes: int
    available: bool
    reason: RejectionReason | None = None
    provider_id: str | None = None
    service_id: str | None = None  # service to book the slot with; differs for other providers
    provider_name: str | None = None  # set on alternatives
