from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Callable
from zoneinfo import ZoneInfo

from booking_engine.application.exceptions import SchedulingRejected
from booking_engine.application.ports.availability_store import AvailabilityStorePort
from booking_engine.application.ports.booking_store import BookingStorePort
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.application.use_cases.conflict_detector import SlotDecision, evaluate_slot
from booking_engine.application.utils.calendar_math import DEFAULT_STEP_MINUTES, slots_for_window
from booking_engine.domain.entities.availability_window import AvailabilityWindow
from booking_engine.domain.entities.booking import Booking
from booking_engine.domain.entities.provider import Provider
from booking_engine.domain.entities.rejection import RejectionReason
from booking_engine.domain.entities.service import Service
from booking_engine.domain.entities.time_slot import TimeSlot


class SlotGeneratorUseCase:
    def __init__(
        self,
        availability: AvailabilityStorePort,
        catalog: ServiceCatalogPort,
        bookings: BookingStorePort,
        timezone: ZoneInfo,
        step_minutes: int = DEFAULT_STEP_MINUTES,
        min_lead_minutes: int = 0,
        default_hours: tuple[time, time] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._availability = availability
        self._catalog = catalog
        self._bookings = bookings
        self._timezone = timezone
        self._step_minutes = step_minutes
        self._min_lead_minutes = min_lead_minutes
        self._default_hours = default_hours
        self._clock = clock or (lambda: datetime.now(timezone))
        self._logger = logging.getLogger(__name__)

    def now(self) -> datetime:
        return self._clock().astimezone(self._timezone)

    def generate_day(
        self,
        provider_id: str,
        service_id: str,
        slot_date: date,
        duration_minutes: int | None = None,
    ) -> list[TimeSlot]:
        """
        All candidate slots of a provider for one service on one date, each marked
        available or with the reason it is not. Read-only; the same inputs and the
        same clock give the same ordered list.
        """
        service = self.resolve_service(provider_id, service_id)
        duration = duration_minutes or service.duration_minutes
        windows = self._windows_for(provider_id, slot_date)
        occupying = self._occupying_for(provider_id, slot_date)
        now = self.now()

        slots: list[TimeSlot] = []
        for window in windows:
            for start in slots_for_window(window, duration, self._step_minutes):
                decision = evaluate_slot(
                    slot_date,
                    start,
                    duration,
                    windows,
                    occupying,
                    now,
                    self._min_lead_minutes,
                )
                slots.append(
                    TimeSlot(
                        date=slot_date,
                        start_time=start,
                        duration_minutes=duration,
                        available=decision.available,
                        reason=decision.reason,
                        provider_id=provider_id,
                        service_id=service.id,
                    )
                )

        slots.sort(key=lambda s: s.start_time)
        return slots

    def evaluate_candidate(
        self,
        provider_id: str,
        slot_date: date,
        start_time: time,
        duration_minutes: int,
    ) -> SlotDecision:
        """Re-read windows and bookings for one candidate and evaluate it."""
        windows = self._windows_for(provider_id, slot_date)
        occupying = self._occupying_for(provider_id, slot_date)
        return evaluate_slot(
            slot_date,
            start_time,
            duration_minutes,
            windows,
            occupying,
            self.now(),
            self._min_lead_minutes,
        )

    def resolve_service(self, provider_id: str, service_id: str) -> Service:
        """Load a bookable service of an active provider or raise SchedulingRejected."""
        service = self._catalog.get_service(service_id)
        if service is None or not service.is_active:
            raise SchedulingRejected(RejectionReason.SERVICE_INACTIVE, f"Service {service_id} is not bookable")
        if service.provider_id != provider_id:
            raise SchedulingRejected(
                RejectionReason.SERVICE_INACTIVE,
                f"Service {service_id} is not offered by provider {provider_id}",
            )
        self.resolve_provider(provider_id)
        return service

    def resolve_provider(self, provider_id: str) -> Provider:
        provider = self._catalog.get_provider(provider_id)
        if provider is None or not provider.is_active:
            raise SchedulingRejected(RejectionReason.PROVIDER_NOT_FOUND, f"Provider {provider_id} not found")
        return provider

    def _windows_for(self, provider_id: str, slot_date: date) -> list[AvailabilityWindow]:
        weekday = slot_date.weekday()
        windows = [w for w in self._availability.get_windows(provider_id, weekday) if w.is_active]
        if not windows and self._default_hours:
            start, end = self._default_hours
            windows = [AvailabilityWindow(provider_id, weekday, start, end)]
        return sorted(windows, key=lambda w: w.start_time)

    def _occupying_for(self, provider_id: str, slot_date: date) -> list[Booking]:
        return [b for b in self._bookings.list_occupying(provider_id, slot_date) if b.is_occupying]
