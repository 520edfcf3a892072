from __future__ import annotations

import logging
from typing import Any

import httpx

from booking_engine.application.exceptions import StoreUnavailableError
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.core.config import settings
from booking_engine.domain.entities.provider import Provider
from booking_engine.domain.entities.service import Service


class HttpServiceCatalog(ServiceCatalogPort):
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ) -> None:
        self._base_url = (base_url or settings.CATALOG_BASE_URL or "").rstrip("/")
        self._api_key = api_key or settings.CATALOG_API_KEY
        self._client = client or httpx.Client(timeout=timeout or settings.CATALOG_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

        if not self._base_url:
            raise ValueError("CATALOG_BASE_URL is required for the HTTP service catalog")

    def get_service(self, service_id: str) -> Service | None:
        data = self._get_json(f"/services/{service_id}")
        if data is None:
            return None
        try:
            return _parse_service(data)
        except (KeyError, ValueError, TypeError) as e:
            self._logger.error("Malformed catalog service", extra={"service_id": service_id, "error": str(e)})
            raise StoreUnavailableError(f"Service catalog returned a malformed record for {service_id}") from e

    def get_provider(self, provider_id: str) -> Provider | None:
        data = self._get_json(f"/providers/{provider_id}")
        if data is None:
            return None
        return Provider(
            id=str(data["id"]),
            display_name=data.get("business_name") or data.get("full_name") or "Unknown Provider",
            rating=float(data.get("average_rating") or 0.0),
            is_active=bool(data.get("is_active", True)),
        )

    def find_equivalent_services(self, service_id: str) -> list[Service]:
        data = self._get_json(f"/services/{service_id}/equivalents")
        if not data:
            return []
        items = data.get("services", []) if isinstance(data, dict) else data
        services: list[Service] = []
        for item in items:
            try:
                service = _parse_service(item)
            except (KeyError, ValueError, TypeError):
                self._logger.warning("Skipping malformed catalog entry", extra={"service_id": item.get("id")})
                continue
            if service.is_active:
                services.append(service)
        return services

    def _get_json(self, path: str) -> Any:
        """GET a catalog resource. Returns None on 404; raises StoreUnavailableError when unreachable."""
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        try:
            response = self._client.get(f"{self._base_url}{path}", headers=headers)
        except httpx.HTTPError as e:
            self._logger.error("Catalog request failed", extra={"path": path, "error": str(e)})
            raise StoreUnavailableError(f"Service catalog unreachable: {e}") from e

        if response.status_code == 404:
            return None
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "Catalog returned an error",
                extra={"path": path, "status_code": response.status_code},
            )
            raise StoreUnavailableError(f"Service catalog error {response.status_code}") from e
        return response.json()


def _parse_service(data: dict[str, Any]) -> Service:
    return Service(
        id=str(data["id"]),
        provider_id=str(data["provider_id"]),
        name=data["name"],
        duration_minutes=int(data["duration_minutes"]),
        category=data.get("category_id"),
        is_active=bool(data.get("is_active", True)),
    )
