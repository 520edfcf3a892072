from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from booking_engine.domain.entities.booking import Booking, BookingStatus


class BookingStorePort(ABC):
    @abstractmethod
    def list_occupying(self, provider_id: str, booking_date: date) -> list[Booking]:
        """Bookings of a provider on a date whose status still blocks time."""
        raise NotImplementedError

    @abstractmethod
    def insert(self, booking: Booking) -> Booking:
        """
        Persist a new booking. Only the booking transaction manager calls this,
        after re-validating the slot under its (provider, date) lock.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    @abstractmethod
    def update_status(self, booking_id: str, status: BookingStatus) -> Booking | None:
        """Status transition hook for booking-management collaborators. Returns None if unknown."""
        raise NotImplementedError
