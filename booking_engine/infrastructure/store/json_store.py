from __future__ import annotations

import json
import logging
import threading
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

from booking_engine.application.exceptions import StoreUnavailableError
from booking_engine.application.ports.booking_store import BookingStorePort
from booking_engine.domain.entities.booking import Booking, BookingStatus


class JsonBookingStore(BookingStorePort):
    """Bookings persisted as one JSON file per provider."""

    def __init__(self, data_dir: str = "./data/bookings") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, provider_id: str) -> threading.Lock:
        """Get or create a lock for a provider file."""
        with self._lock_lock:
            if provider_id not in self._locks:
                self._locks[provider_id] = threading.Lock()
            return self._locks[provider_id]

    def _get_file_path(self, provider_id: str) -> Path:
        return self._data_dir / f"{provider_id}.json"

    def _load_provider_data(self, provider_id: str) -> dict[str, Any]:
        """Load provider data from JSON file, return default if missing."""
        file_path = self._get_file_path(provider_id)
        if not file_path.exists():
            return {"provider_id": provider_id, "bookings": [], "version": 1}

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            # An unreadable file must not look like an empty calendar
            self._logger.error("Booking file unreadable", extra={"provider_id": provider_id, "error": str(e)})
            raise StoreUnavailableError(f"Booking data for provider {provider_id} is unreadable") from e

        if "version" not in data:
            data["version"] = 1
        data.setdefault("bookings", [])
        return data

    def _save_provider_data(self, provider_id: str, data: dict[str, Any]) -> None:
        """Save provider data to JSON file atomically."""
        file_path = self._get_file_path(provider_id)
        temp_path = file_path.with_suffix(".json.tmp")

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink(missing_ok=True)
            raise StoreUnavailableError(f"Could not write booking data for provider {provider_id}") from e

    def _serialize_booking(self, booking: Booking) -> dict[str, Any]:
        return {
            "id": booking.id,
            "provider_id": booking.provider_id,
            "customer_id": booking.customer_id,
            "service_id": booking.service_id,
            "booking_date": booking.booking_date.isoformat(),
            "start_time": booking.start_time.strftime("%H:%M"),
            "duration_minutes": booking.duration_minutes,
            "status": booking.status.value,
            "address": booking.address,
            "notes": booking.notes,
            "created_at": booking.created_at.isoformat(),
        }

    def _deserialize_booking(self, data: dict[str, Any]) -> Booking:
        return Booking(
            id=data["id"],
            provider_id=data["provider_id"],
            customer_id=data["customer_id"],
            service_id=data["service_id"],
            booking_date=date.fromisoformat(data["booking_date"]),
            start_time=time.fromisoformat(data["start_time"]),
            duration_minutes=int(data["duration_minutes"]),
            status=BookingStatus(data.get("status", BookingStatus.pending.value)),
            address=data.get("address", ""),
            notes=data.get("notes"),
            created_at=datetime.fromisoformat(data["created_at"]),
        )

    def list_occupying(self, provider_id: str, booking_date: date) -> list[Booking]:
        with self._get_lock(provider_id):
            data = self._load_provider_data(provider_id)
        bookings = [self._deserialize_booking(item) for item in data["bookings"]]
        return sorted(
            (b for b in bookings if b.booking_date == booking_date and b.is_occupying),
            key=lambda b: b.start_time,
        )

    def insert(self, booking: Booking) -> Booking:
        with self._get_lock(booking.provider_id):
            data = self._load_provider_data(booking.provider_id)
            if any(item["id"] == booking.id for item in data["bookings"]):
                raise ValueError(f"Booking {booking.id} already exists")
            data["bookings"].append(self._serialize_booking(booking))
            self._save_provider_data(booking.provider_id, data)
        return booking

    def get(self, booking_id: str) -> Booking | None:
        # Search all provider files; bookings are not indexed by id
        for file_path in self._data_dir.glob("*.json"):
            with self._get_lock(file_path.stem):
                data = self._load_provider_data(file_path.stem)
            for item in data["bookings"]:
                if item["id"] == booking_id:
                    return self._deserialize_booking(item)
        return None

    def update_status(self, booking_id: str, status: BookingStatus) -> Booking | None:
        for file_path in self._data_dir.glob("*.json"):
            provider_id = file_path.stem
            with self._get_lock(provider_id):
                data = self._load_provider_data(provider_id)
                for item in data["bookings"]:
                    if item["id"] == booking_id:
                        item["status"] = status.value
                        self._save_provider_data(provider_id, data)
                        return self._deserialize_booking(item)
        return None
