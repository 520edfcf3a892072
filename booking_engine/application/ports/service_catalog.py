from __future__ import annotations

from abc import ABC, abstractmethod

from booking_engine.domain.entities.provider import Provider
from booking_engine.domain.entities.service import Service


class ServiceCatalogPort(ABC):
    @abstractmethod
    def get_service(self, service_id: str) -> Service | None:
        """Get service by id, active or not."""
        raise NotImplementedError

    @abstractmethod
    def get_provider(self, provider_id: str) -> Provider | None:
        """Get provider by id, active or not."""
        raise NotImplementedError

    @abstractmethod
    def find_equivalent_services(self, service_id: str) -> list[Service]:
        """Active services of other providers that offer the same thing as service_id."""
        raise NotImplementedError
