"""
Tests for the scheduling HTTP API.
"""

from __future__ import annotations

from datetime import date, time

import pytest
from fastapi.testclient import TestClient

from booking_engine.application.exceptions import StoreUnavailableError
from booking_engine.application.use_cases.alternative_finder import AlternativeFinderUseCase
from booking_engine.application.use_cases.booking_transaction import BookingTransactionManager
from booking_engine.domain.entities.provider import Provider
from booking_engine.main import app
from booking_engine.wiring.dependencies import (
    get_alternative_finder,
    get_slot_generator,
    get_transaction_manager,
)
from tests.conftest import make_booking, make_slot_generator

ADDRESS = "42 Harbour Road, Springfield"


@pytest.fixture
def client(store):
    generator = make_slot_generator(store)
    app.dependency_overrides[get_slot_generator] = lambda: generator
    app.dependency_overrides[get_alternative_finder] = lambda: AlternativeFinderUseCase(generator, store)
    manager = BookingTransactionManager(generator, store)
    app.dependency_overrides[get_transaction_manager] = lambda: manager
    yield TestClient(app)
    app.dependency_overrides.clear()


def _booking_body(**overrides):
    body = {
        "provider_id": "prov_a",
        "service_id": "svc_a",
        "customer_id": "cust_1",
        "date": "2030-01-07",
        "time": "10:00",
        "address": ADDRESS,
    }
    body.update(overrides)
    return body


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_day_slots(client):
    response = client.get("/api/v1/providers/prov_a/slots", params={"service_id": "svc_a", "date": "2030-01-07"})

    assert response.status_code == 200
    slots = response.json()
    assert len(slots) == 13
    assert slots[0]["time"] == "09:00:00"
    assert slots[0]["available"] is True
    assert slots[0]["reason"] is None


def test_day_slots_unknown_provider(client):
    response = client.get("/api/v1/providers/prov_x/slots", params={"service_id": "svc_a", "date": "2030-01-07"})
    assert response.status_code == 422
    assert response.json()["detail"]["reason"] == "SERVICE_INACTIVE"


def test_day_slots_inactive_provider(client, store):
    store.add_provider(Provider(id="prov_a", display_name="Alpha Cleaning", is_active=False))
    response = client.get("/api/v1/providers/prov_a/slots", params={"service_id": "svc_a", "date": "2030-01-07"})
    assert response.status_code == 404
    assert response.json()["detail"]["reason"] == "PROVIDER_NOT_FOUND"


def test_create_booking_then_conflict(client):
    created = client.post("/api/v1/bookings", json=_booking_body())
    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "pending"
    assert body["duration_minutes"] == 60

    conflict = client.post("/api/v1/bookings", json=_booking_body(customer_id="cust_2", time="10:30"))
    assert conflict.status_code == 409
    assert conflict.json()["detail"]["reason"] == "OVERLAPS_BOOKING"


def test_create_booking_outside_hours(client):
    response = client.post("/api/v1/bookings", json=_booking_body(time="18:00"))
    assert response.status_code == 409
    assert response.json()["detail"]["reason"] == "OUTSIDE_HOURS"


def test_create_booking_short_address(client):
    response = client.post("/api/v1/bookings", json=_booking_body(address="short"))
    assert response.status_code == 422


def test_alternatives(client, store):
    store.insert(make_booking("prov_a", date(2030, 1, 7), time(10, 0)))
    response = client.get(
        "/api/v1/services/svc_a/alternatives",
        params={"date": "2030-01-07", "time": "10:00"},
    )
    assert response.status_code == 200
    times = [s["time"] for s in response.json()]
    assert times[:2] == ["09:00:00", "11:00:00"]
    assert response.json()[0]["provider_name"] == "Alpha Cleaning"


def test_alternatives_invalid_max_results(client):
    response = client.get(
        "/api/v1/services/svc_a/alternatives",
        params={"date": "2030-01-07", "time": "10:00", "max_results": 0},
    )
    assert response.status_code == 422


def test_recurring_booking(client):
    body = _booking_body(recurrence={"type": "weekly", "end_date": "2030-01-21"})
    response = client.post("/api/v1/bookings/recurring", json=body)

    assert response.status_code == 200
    result = response.json()
    assert [b["date"] for b in result["committed"]] == ["2030-01-07", "2030-01-14", "2030-01-21"]
    assert result["skipped"] == []
    assert result["error"] is None


def test_recurring_booking_empty_pattern(client):
    body = _booking_body(recurrence={"type": "weekly", "end_date": "2030-01-06"})
    response = client.post("/api/v1/bookings/recurring", json=body)

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "EMPTY_PATTERN"


def test_recurring_booking_monthly_with_weekdays(client):
    body = _booking_body(recurrence={"type": "monthly", "end_date": "2030-06-07", "weekdays": [0]})
    response = client.post("/api/v1/bookings/recurring", json=body)
    assert response.status_code == 422


def test_store_unavailable_is_503(client, store, monkeypatch):
    def fail(provider_id, booking_date):
        raise StoreUnavailableError("booking store offline")

    monkeypatch.setattr(store, "list_occupying", fail)

    slots = client.get("/api/v1/providers/prov_a/slots", params={"service_id": "svc_a", "date": "2030-01-07"})
    booking = client.post("/api/v1/bookings", json=_booking_body())

    assert slots.status_code == 503
    assert booking.status_code == 503
