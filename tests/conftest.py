"""Shared test fixtures and helpers."""

from __future__ import annotations

import uuid
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

import pytest

from booking_engine.application.use_cases.alternative_finder import AlternativeFinderUseCase
from booking_engine.application.use_cases.booking_transaction import BookingTransactionManager
from booking_engine.application.use_cases.slot_generator import SlotGeneratorUseCase
from booking_engine.domain.entities.availability_window import AvailabilityWindow
from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.provider import Provider
from booking_engine.domain.entities.service import Service
from booking_engine.infrastructure.store.memory_store import MemorySchedulingStore

UTC = ZoneInfo("UTC")
MONDAY = date(2030, 1, 7)
FIXED_NOW = datetime(2030, 1, 7, 8, 0, tzinfo=UTC)  # early on MONDAY


def make_booking(
    provider_id: str,
    booking_date: date,
    start: time,
    duration_minutes: int = 60,
    status: BookingStatus = BookingStatus.confirmed,
    service_id: str = "svc_a",
) -> Booking:
    return Booking(
        id=str(uuid.uuid4()),
        provider_id=provider_id,
        customer_id="cust_existing",
        service_id=service_id,
        booking_date=booking_date,
        start_time=start,
        duration_minutes=duration_minutes,
        status=status,
        address="1 Existing Street, Springfield",
    )


def make_slot_generator(store: MemorySchedulingStore, now: datetime = FIXED_NOW, **kwargs) -> SlotGeneratorUseCase:
    return SlotGeneratorUseCase(
        availability=store,
        catalog=store,
        bookings=store,
        timezone=UTC,
        clock=lambda: now,
        **kwargs,
    )


@pytest.fixture
def store() -> MemorySchedulingStore:
    """Provider prov_a works Mondays 09:00-13:00 and offers a 60 minute service svc_a."""
    s = MemorySchedulingStore()
    s.add_provider(Provider(id="prov_a", display_name="Alpha Cleaning", rating=4.5))
    s.add_service(Service(id="svc_a", provider_id="prov_a", name="Deep Clean", category="cleaning", duration_minutes=60))
    s.save_window(AvailabilityWindow("prov_a", 0, time(9, 0), time(13, 0)))
    return s


@pytest.fixture
def slot_generator(store: MemorySchedulingStore) -> SlotGeneratorUseCase:
    return make_slot_generator(store)


@pytest.fixture
def alternative_finder(store: MemorySchedulingStore, slot_generator: SlotGeneratorUseCase) -> AlternativeFinderUseCase:
    return AlternativeFinderUseCase(slot_generator=slot_generator, catalog=store)


@pytest.fixture
def manager(store: MemorySchedulingStore, slot_generator: SlotGeneratorUseCase) -> BookingTransactionManager:
    return BookingTransactionManager(slot_generator=slot_generator, bookings=store)


def add_other_provider(
    store: MemorySchedulingStore,
    provider_id: str = "prov_b",
    rating: float = 4.0,
    start: time = time(9, 0),
    end: time = time(17, 0),
) -> None:
    """Another provider offering an equivalent Deep Clean on Mondays."""
    store.add_provider(Provider(id=provider_id, display_name=f"Provider {provider_id}", rating=rating))
    store.add_service(
        Service(
            id=f"svc_{provider_id}",
            provider_id=provider_id,
            name="deep clean",
            category="cleaning",
            duration_minutes=60,
        )
    )
    store.save_window(AvailabilityWindow(provider_id, 0, start, end))
