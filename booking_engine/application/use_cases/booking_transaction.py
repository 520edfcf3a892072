from __future__ import annotations

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Iterator

from booking_engine.application.exceptions import SchedulingRejected
from booking_engine.application.ports.booking_store import BookingStorePort
from booking_engine.application.use_cases.recurrence import DEFAULT_MAX_OCCURRENCES, expand_pattern
from booking_engine.application.use_cases.slot_generator import SlotGeneratorUseCase
from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.recurrence import RecurrencePattern
from booking_engine.domain.entities.rejection import RejectionReason


@dataclass(frozen=True)
class CommitResult:
    booking: Booking | None = None
    reason: RejectionReason | None = None
    message: str | None = None
    conflicting_booking_ids: tuple[str, ...] = ()

    @property
    def committed(self) -> bool:
        return self.booking is not None


@dataclass(frozen=True)
class SkippedOccurrence:
    date: date
    time: time
    reason: RejectionReason


@dataclass(frozen=True)
class RecurringCommitResult:
    committed: list[Booking] = field(default_factory=list)
    skipped: list[SkippedOccurrence] = field(default_factory=list)
    error: RejectionReason | None = None  # EMPTY_PATTERN when the pattern yields nothing
    capped: bool = False
    skipped_dates: list[date] = field(default_factory=list)


class BookingTransactionManager:
    """
    The only writer of bookings.

    Every commit re-validates its slot against freshly read bookings while holding
    the lock for its (provider, date) pair, so two requests racing for the same
    provider and day are applied one after the other. Pairs never share a lock,
    and a pair's lock is dropped from the table once nobody holds or waits on it.
    All writers must go through one instance so they share its lock table.
    """

    def __init__(
        self,
        slot_generator: SlotGeneratorUseCase,
        bookings: BookingStorePort,
        max_occurrences: int = DEFAULT_MAX_OCCURRENCES,
    ) -> None:
        self._slot_generator = slot_generator
        self._bookings = bookings
        self._max_occurrences = max_occurrences
        self._locks: dict[tuple[str, date], list] = {}  # key -> [lock, holders and waiters]
        self._lock_lock = threading.Lock()  # Lock for managing locks dict
        self._logger = logging.getLogger(__name__)

    @contextmanager
    def _locked(self, provider_id: str, booking_date: date) -> Iterator[None]:
        """Hold the lock for a (provider, date) pair, creating and releasing its table entry."""
        key = (provider_id, booking_date)
        with self._lock_lock:
            entry = self._locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._lock_lock:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def commit_single(
        self,
        provider_id: str,
        service_id: str,
        customer_id: str,
        booking_date: date,
        start_time: time,
        address: str,
        notes: str | None = None,
    ) -> CommitResult:
        try:
            service = self._slot_generator.resolve_service(provider_id, service_id)
        except SchedulingRejected as e:
            self._log_rejection(provider_id, service_id, booking_date, start_time, e.reason)
            return CommitResult(reason=e.reason, message=str(e))

        with self._locked(provider_id, booking_date):
            decision = self._slot_generator.evaluate_candidate(
                provider_id,
                booking_date,
                start_time,
                service.duration_minutes,
            )
            if not decision.available:
                conflicting_ids = tuple(b.id for b in decision.conflicts)
                self._log_rejection(provider_id, service_id, booking_date, start_time, decision.reason, conflicting_ids)
                return CommitResult(
                    reason=decision.reason,
                    message=_REJECTION_MESSAGES[decision.reason],
                    conflicting_booking_ids=conflicting_ids,
                )

            booking = self._bookings.insert(
                Booking(
                    id=str(uuid.uuid4()),
                    provider_id=provider_id,
                    customer_id=customer_id,
                    service_id=service.id,
                    booking_date=booking_date,
                    start_time=start_time,
                    duration_minutes=service.duration_minutes,
                    status=BookingStatus.pending,
                    address=address,
                    notes=notes,
                    created_at=datetime.now(timezone.utc),
                )
            )

        self._logger.info(
            "Booking committed",
            extra={
                "booking_id": booking.id,
                "provider_id": provider_id,
                "service_id": service.id,
                "date": booking_date.isoformat(),
                "time": start_time.strftime("%H:%M"),
            },
        )
        return CommitResult(booking=booking)

    def commit_recurring(
        self,
        pattern: RecurrencePattern,
        service_id: str,
        provider_id: str,
        customer_id: str,
        address: str,
        notes: str | None = None,
    ) -> RecurringCommitResult:
        """
        Commit every occurrence of a pattern as its own short transaction.

        A rejected occurrence is reported in `skipped` and does not stop the rest;
        occurrences already committed stay committed if a later one fails.
        """
        expansion = expand_pattern(pattern, self._max_occurrences)
        if not expansion.occurrences:
            self._logger.info(
                "Recurring booking pattern is empty",
                extra={"provider_id": provider_id, "reason": RejectionReason.EMPTY_PATTERN.value},
            )
            return RecurringCommitResult(
                error=RejectionReason.EMPTY_PATTERN,
                skipped_dates=expansion.skipped_dates,
            )

        committed: list[Booking] = []
        skipped: list[SkippedOccurrence] = []
        for occurrence in expansion.occurrences:
            result = self.commit_single(
                provider_id,
                service_id,
                customer_id,
                occurrence.date,
                occurrence.time,
                address,
                notes,
            )
            if result.booking is not None:
                committed.append(result.booking)
            else:
                skipped.append(SkippedOccurrence(occurrence.date, occurrence.time, result.reason))

        return RecurringCommitResult(
            committed=committed,
            skipped=skipped,
            capped=expansion.capped,
            skipped_dates=expansion.skipped_dates,
        )

    def _log_rejection(
        self,
        provider_id: str,
        service_id: str,
        booking_date: date,
        start_time: time,
        reason: RejectionReason | None,
        conflicting_ids: tuple[str, ...] = (),
    ) -> None:
        self._logger.info(
            "Booking rejected",
            extra={
                "provider_id": provider_id,
                "service_id": service_id,
                "date": booking_date.isoformat(),
                "time": start_time.strftime("%H:%M"),
                "reason": reason.value if reason else None,
                "booking_id": ",".join(conflicting_ids) or None,
            },
        )


_REJECTION_MESSAGES = {
    RejectionReason.OUTSIDE_HOURS: "The provider is not working at this time.",
    RejectionReason.OVERLAPS_BOOKING: "This time is no longer available.",
    RejectionReason.IN_PAST: "This time has already passed or is too soon to book.",
}
