from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timezone
from enum import Enum


class BookingStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"
    disputed = "disputed"


OCCUPYING_STATUSES = frozenset(
    {BookingStatus.pending, BookingStatus.confirmed, BookingStatus.in_progress}
)


@dataclass(frozen=True)
class Booking:
    id: str
    provider_id: str
    customer_id: str
    service_id: str
    booking_date: date
    start_time: time
    duration_minutes: int  # copied from the service when the booking is created
    status: BookingStatus = BookingStatus.pending
    address: str = ""
    notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_occupying(self) -> bool:
        return self.status in OCCUPYING_STATUSES

    @property
    def start_minute(self) -> int:
        return self.start_time.hour * 60 + self.start_time.minute

    @property
    def end_minute(self) -> int:
        return self.start_minute + self.duration_minutes

    def with_status(self, status: BookingStatus) -> Booking:
        return replace(self, status=status)
