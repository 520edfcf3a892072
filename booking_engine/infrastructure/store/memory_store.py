from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import date

from booking_engine.application.ports.availability_store import AvailabilityStorePort
from booking_engine.application.ports.booking_store import BookingStorePort
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.domain.entities.availability_window import AvailabilityWindow
from booking_engine.domain.entities.booking import Booking, BookingStatus
from booking_engine.domain.entities.provider import Provider
from booking_engine.domain.entities.service import Service


class MemorySchedulingStore(AvailabilityStorePort, ServiceCatalogPort, BookingStorePort):
    """Single-process store backing availability, catalog and bookings."""

    def __init__(self) -> None:
        self._windows: dict[str, AvailabilityWindow] = {}
        self._providers: dict[str, Provider] = {}
        self._services: dict[str, Service] = {}
        self._bookings: dict[str, Booking] = {}
        self._lock = threading.Lock()

    # Availability

    def get_windows(self, provider_id: str, day_of_week: int) -> list[AvailabilityWindow]:
        with self._lock:
            windows = [
                w
                for w in self._windows.values()
                if w.provider_id == provider_id and w.day_of_week == day_of_week and w.is_active
            ]
        return sorted(windows, key=lambda w: w.start_time)

    def save_window(self, window: AvailabilityWindow) -> AvailabilityWindow:
        if window.id is None:
            window = replace(window, id=str(uuid.uuid4()))
        with self._lock:
            if window.is_active:
                for existing in self._windows.values():
                    if existing.id != window.id and existing.is_active and existing.overlaps(window):
                        raise ValueError(
                            f"Window {window.start_time:%H:%M}-{window.end_time:%H:%M} overlaps "
                            f"{existing.start_time:%H:%M}-{existing.end_time:%H:%M} on day {window.day_of_week}"
                        )
            self._windows[window.id] = window
        return window

    def deactivate_window(self, window_id: str) -> bool:
        with self._lock:
            window = self._windows.get(window_id)
            if window is None:
                return False
            self._windows[window_id] = replace(window, is_active=False)
            return True

    # Catalog

    def add_provider(self, provider: Provider) -> None:
        with self._lock:
            self._providers[provider.id] = provider

    def add_service(self, service: Service) -> None:
        with self._lock:
            self._services[service.id] = service

    def get_service(self, service_id: str) -> Service | None:
        return self._services.get(service_id)

    def get_provider(self, provider_id: str) -> Provider | None:
        return self._providers.get(provider_id)

    def find_equivalent_services(self, service_id: str) -> list[Service]:
        service = self._services.get(service_id)
        if service is None:
            return []
        with self._lock:
            return [
                s
                for s in self._services.values()
                if s.is_active and s.provider_id != service.provider_id and s.is_equivalent_to(service)
            ]

    # Bookings

    def list_occupying(self, provider_id: str, booking_date: date) -> list[Booking]:
        with self._lock:
            bookings = [
                b
                for b in self._bookings.values()
                if b.provider_id == provider_id and b.booking_date == booking_date and b.is_occupying
            ]
        return sorted(bookings, key=lambda b: b.start_time)

    def insert(self, booking: Booking) -> Booking:
        with self._lock:
            if booking.id in self._bookings:
                raise ValueError(f"Booking {booking.id} already exists")
            self._bookings[booking.id] = booking
        return booking

    def get(self, booking_id: str) -> Booking | None:
        return self._bookings.get(booking_id)

    def update_status(self, booking_id: str, status: BookingStatus) -> Booking | None:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                return None
            updated = booking.with_status(status)
            self._bookings[booking_id] = updated
            return updated

    def all_bookings(self) -> list[Booking]:
        with self._lock:
            return list(self._bookings.values())
