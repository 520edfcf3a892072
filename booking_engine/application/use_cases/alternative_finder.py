from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, time, timedelta

from booking_engine.application.exceptions import SchedulingRejected
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.application.use_cases.slot_generator import SlotGeneratorUseCase
from booking_engine.application.utils.calendar_math import time_to_minutes
from booking_engine.domain.entities.provider import Provider
from booking_engine.domain.entities.rejection import RejectionReason
from booking_engine.domain.entities.service import Service
from booking_engine.domain.entities.time_slot import TimeSlot

SAME_PROVIDER_TIER = 0
OTHER_PROVIDER_TIER = 1


@dataclass(frozen=True)
class _Candidate:
    slot: TimeSlot
    day_distance: int
    minute_distance: int
    tier: int
    rating: float

    def rank_key(self) -> tuple:
        return (
            self.day_distance,
            self.tier,
            self.minute_distance,
            -self.rating,
            self.slot.provider_id or "",
            self.slot.date,
            self.slot.start_time,
        )


class AlternativeFinderUseCase:
    def __init__(
        self,
        slot_generator: SlotGeneratorUseCase,
        catalog: ServiceCatalogPort,
        horizon_days: int = 14,
        same_day_limit: int = 4,
    ) -> None:
        self._slot_generator = slot_generator
        self._catalog = catalog
        self._horizon_days = horizon_days
        self._same_day_limit = same_day_limit
        self._logger = logging.getLogger(__name__)

    def find_alternatives(
        self,
        service_id: str,
        rejected_date: date,
        rejected_time: time,
        duration_minutes: int | None = None,
        max_results: int = 5,
    ) -> list[TimeSlot]:
        """
        Ranked alternatives for a rejected request.

        The service's own provider is searched first: nearest free slots on the
        requested day, then the earliest free slot on each following day up to the
        horizon. Only when that leaves the list short are other active providers of
        an equivalent service searched the same way. An empty list means nothing
        was found inside the horizon.
        """
        if max_results < 1:
            raise ValueError(f"max_results must be >= 1, got {max_results}")

        service = self._catalog.get_service(service_id)
        if service is None or not service.is_active:
            raise SchedulingRejected(RejectionReason.SERVICE_INACTIVE, f"Service {service_id} is not bookable")
        provider = self._slot_generator.resolve_provider(service.provider_id)
        duration = duration_minutes or service.duration_minutes

        candidates = self._search_provider(
            provider,
            service,
            rejected_date,
            rejected_time,
            duration,
            max_results,
            tier=SAME_PROVIDER_TIER,
        )

        if len(candidates) < max_results:
            for other_service in self._catalog.find_equivalent_services(service.id):
                if other_service.provider_id == provider.id:
                    continue
                other_provider = self._catalog.get_provider(other_service.provider_id)
                if other_provider is None or not other_provider.is_active:
                    continue
                candidates.extend(
                    self._search_provider(
                        other_provider,
                        other_service,
                        rejected_date,
                        rejected_time,
                        duration,
                        max_results,
                        tier=OTHER_PROVIDER_TIER,
                    )
                )

        candidates.sort(key=_Candidate.rank_key)
        results = [c.slot for c in candidates[:max_results]]
        self._logger.info(
            "Alternatives found",
            extra={
                "service_id": service_id,
                "date": rejected_date.isoformat(),
                "time": rejected_time.strftime("%H:%M"),
                "count": len(results),
            },
        )
        return results

    def _search_provider(
        self,
        provider: Provider,
        service: Service,
        rejected_date: date,
        rejected_time: time,
        duration: int,
        max_results: int,
        tier: int,
    ) -> list[_Candidate]:
        requested_minute = time_to_minutes(rejected_time)
        found: list[_Candidate] = []

        same_day = [
            s
            for s in self._slot_generator.generate_day(provider.id, service.id, rejected_date, duration)
            if s.available and not (tier == SAME_PROVIDER_TIER and s.start_time == rejected_time)
        ]
        same_day.sort(key=lambda s: (abs(time_to_minutes(s.start_time) - requested_minute), s.start_time))
        for slot in same_day[: min(self._same_day_limit, max_results)]:
            found.append(_candidate(slot, 0, requested_minute, tier, provider))

        for offset in range(1, self._horizon_days + 1):
            if len(found) >= max_results:
                break
            day = rejected_date + timedelta(days=offset)
            earliest = next(
                (s for s in self._slot_generator.generate_day(provider.id, service.id, day, duration) if s.available),
                None,
            )
            if earliest is not None:
                found.append(_candidate(earliest, offset, requested_minute, tier, provider))

        return found


def _candidate(slot: TimeSlot, day_distance: int, requested_minute: int, tier: int, provider: Provider) -> _Candidate:
    return _Candidate(
        slot=replace(slot, provider_name=provider.display_name),
        day_distance=day_distance,
        minute_distance=abs(time_to_minutes(slot.start_time) - requested_minute),
        tier=tier,
        rating=provider.rating,
    )
