from __future__ import annotations

from abc import ABC, abstractmethod

from booking_engine.domain.entities.availability_window import AvailabilityWindow


class AvailabilityStorePort(ABC):
    @abstractmethod
    def get_windows(self, provider_id: str, day_of_week: int) -> list[AvailabilityWindow]:
        """Active windows of a provider for a weekday, ordered by start time."""
        raise NotImplementedError

    @abstractmethod
    def save_window(self, window: AvailabilityWindow) -> AvailabilityWindow:
        """
        Create or replace a window. Raises ValueError if it overlaps another
        active window of the same provider and weekday.
        """
        raise NotImplementedError

    @abstractmethod
    def deactivate_window(self, window_id: str) -> bool:
        """Deactivate a window. Returns True if it existed."""
        raise NotImplementedError
