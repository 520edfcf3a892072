from __future__ import annotations

import datetime as dt
from typing import Annotated

from pydantic import BaseModel, Field, model_validator

from booking_engine.application.use_cases.booking_transaction import RecurringCommitResult
from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.recurrence import RecurrenceType
from booking_engine.domain.entities.rejection import RejectionReason
from booking_engine.domain.entities.time_slot import TimeSlot


class TimeSlotSchema(BaseModel):
    date: dt.date
    time: dt.time
    duration_minutes: int
    available: bool
    reason: RejectionReason | None = None
    provider_id: str | None = None
    service_id: str | None = None
    provider_name: str | None = None

    @classmethod
    def from_slot(cls, slot: TimeSlot) -> TimeSlotSchema:
        return cls(
            date=slot.date,
            time=slot.start_time,
            duration_minutes=slot.duration_minutes,
            available=slot.available,
            reason=slot.reason,
            provider_id=slot.provider_id,
            service_id=slot.service_id,
            provider_name=slot.provider_name,
        )


class BookingSchema(BaseModel):
    id: str
    provider_id: str
    customer_id: str
    service_id: str
    date: dt.date
    time: dt.time
    duration_minutes: int
    status: BookingStatus
    address: str
    notes: str | None = None
    created_at: dt.datetime

    @classmethod
    def from_booking(cls, booking: Booking) -> BookingSchema:
        return cls(
            id=booking.id,
            provider_id=booking.provider_id,
            customer_id=booking.customer_id,
            service_id=booking.service_id,
            date=booking.booking_date,
            time=booking.start_time,
            duration_minutes=booking.duration_minutes,
            status=booking.status,
            address=booking.address,
            notes=booking.notes,
            created_at=booking.created_at,
        )


class RejectionSchema(BaseModel):
    reason: RejectionReason
    message: str


class CreateBookingRequestSchema(BaseModel):
    provider_id: str = Field(min_length=1)
    service_id: str = Field(min_length=1)
    customer_id: str = Field(min_length=1)
    date: dt.date
    time: dt.time
    address: str = Field(min_length=10)
    notes: str | None = None


class RecurrenceSchema(BaseModel):
    type: RecurrenceType
    end_date: dt.date
    weekdays: list[Annotated[int, Field(ge=0, le=6)]] | None = None  # 0 = Monday

    @model_validator(mode="after")
    def _weekdays_only_for_weekly(self) -> RecurrenceSchema:
        if self.weekdays and self.type == RecurrenceType.monthly:
            raise ValueError("weekdays can only be used with weekly or biweekly recurrence")
        return self


class CreateRecurringBookingRequestSchema(CreateBookingRequestSchema):
    recurrence: RecurrenceSchema


class SkippedOccurrenceSchema(BaseModel):
    date: dt.date
    time: dt.time
    reason: RejectionReason


class RecurringBookingResponseSchema(BaseModel):
    committed: list[BookingSchema] = Field(default_factory=list)
    skipped: list[SkippedOccurrenceSchema] = Field(default_factory=list)
    error: RejectionReason | None = None
    capped: bool = False
    skipped_dates: list[dt.date] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: RecurringCommitResult) -> RecurringBookingResponseSchema:
        return cls(
            committed=[BookingSchema.from_booking(b) for b in result.committed],
            skipped=[SkippedOccurrenceSchema(date=s.date, time=s.time, reason=s.reason) for s in result.skipped],
            error=result.error,
            capped=result.capped,
            skipped_dates=result.skipped_dates,
        )
