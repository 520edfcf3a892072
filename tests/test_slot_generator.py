"""
Tests for full-day slot generation.
"""

from __future__ import annotations

from datetime import time, timedelta

import pytest

from booking_engine.application.exceptions import SchedulingRejected
from booking_engine.domain.entities.availability_window import AvailabilityWindow
from booking_engine.domain.entities.booking import BookingStatus
from booking_engine.domain.entities.provider import Provider
from booking_engine.domain.entities.rejection import RejectionReason
from booking_engine.domain.entities.service import Service
from tests.conftest import MONDAY, make_booking, make_slot_generator


def _times(slots):
    return [s.start_time for s in slots]


def test_monday_window_without_bookings(slot_generator):
    """09:00-13:00 window, 60 minute service: 15 minute starts from 09:00 to 12:00, all free."""
    slots = slot_generator.generate_day("prov_a", "svc_a", MONDAY)

    assert _times(slots)[0] == time(9, 0)
    assert _times(slots)[-1] == time(12, 0)
    assert len(slots) == 13
    assert all(s.available for s in slots)
    assert all(s.duration_minutes == 60 for s in slots)
    assert all(s.provider_id == "prov_a" and s.service_id == "svc_a" for s in slots)


def test_existing_booking_blocks_overlapping_slots(store, slot_generator):
    store.insert(make_booking("prov_a", MONDAY, time(10, 0)))

    slots = {s.start_time: s for s in slot_generator.generate_day("prov_a", "svc_a", MONDAY)}

    for blocked in (time(9, 15), time(9, 30), time(9, 45), time(10, 0), time(10, 15), time(10, 30), time(10, 45)):
        assert slots[blocked].available is False
        assert slots[blocked].reason == RejectionReason.OVERLAPS_BOOKING
    for free in (time(9, 0), time(11, 0), time(11, 15), time(12, 0)):
        assert slots[free].available is True


def test_generate_day_is_idempotent(store, slot_generator):
    store.insert(make_booking("prov_a", MONDAY, time(11, 0)))
    first = slot_generator.generate_day("prov_a", "svc_a", MONDAY)
    second = slot_generator.generate_day("prov_a", "svc_a", MONDAY)
    assert first == second


def test_day_without_windows_is_empty(slot_generator):
    assert slot_generator.generate_day("prov_a", "svc_a", MONDAY + timedelta(days=1)) == []


def test_default_hours_used_when_no_window_that_day(store):
    generator = make_slot_generator(store, default_hours=(time(9, 0), time(18, 0)))
    slots = generator.generate_day("prov_a", "svc_a", MONDAY + timedelta(days=1))
    assert _times(slots)[0] == time(9, 0)
    assert _times(slots)[-1] == time(17, 0)

    # Configured windows still win over the default
    monday = generator.generate_day("prov_a", "svc_a", MONDAY)
    assert _times(monday)[-1] == time(12, 0)


def test_multiple_windows_are_merged_in_order(store, slot_generator):
    store.save_window(AvailabilityWindow("prov_a", 0, time(14, 0), time(15, 30)))
    slots = slot_generator.generate_day("prov_a", "svc_a", MONDAY)
    times = _times(slots)
    assert times == sorted(times)
    assert times[-2:] == [time(14, 15), time(14, 30)]


def test_cancelling_a_booking_frees_its_slot(store, slot_generator):
    booking = store.insert(make_booking("prov_a", MONDAY, time(10, 0)))
    store.update_status(booking.id, BookingStatus.cancelled)
    slots = {s.start_time: s for s in slot_generator.generate_day("prov_a", "svc_a", MONDAY)}
    assert slots[time(10, 0)].available is True


def test_inactive_service_rejected(store, slot_generator):
    store.add_service(Service(id="svc_old", provider_id="prov_a", name="Old", duration_minutes=30, is_active=False))
    with pytest.raises(SchedulingRejected) as exc:
        slot_generator.generate_day("prov_a", "svc_old", MONDAY)
    assert exc.value.reason == RejectionReason.SERVICE_INACTIVE

    with pytest.raises(SchedulingRejected) as exc:
        slot_generator.generate_day("prov_a", "svc_missing", MONDAY)
    assert exc.value.reason == RejectionReason.SERVICE_INACTIVE


def test_service_of_another_provider_rejected(store, slot_generator):
    store.add_provider(Provider(id="prov_b", display_name="Beta"))
    with pytest.raises(SchedulingRejected) as exc:
        slot_generator.generate_day("prov_b", "svc_a", MONDAY)
    assert exc.value.reason == RejectionReason.SERVICE_INACTIVE


def test_unknown_or_inactive_provider_rejected(store, slot_generator):
    store.add_provider(Provider(id="prov_a", display_name="Alpha Cleaning", is_active=False))
    with pytest.raises(SchedulingRejected) as exc:
        slot_generator.generate_day("prov_a", "svc_a", MONDAY)
    assert exc.value.reason == RejectionReason.PROVIDER_NOT_FOUND


def test_overlapping_window_cannot_be_saved(store):
    with pytest.raises(ValueError):
        store.save_window(AvailabilityWindow("prov_a", 0, time(12, 0), time(14, 0)))
    # Touching windows are fine
    store.save_window(AvailabilityWindow("prov_a", 0, time(13, 0), time(14, 0)))


def test_deactivated_window_stops_producing_slots(store, slot_generator):
    window = store.get_windows("prov_a", 0)[0]
    assert store.deactivate_window(window.id) is True
    assert slot_generator.generate_day("prov_a", "svc_a", MONDAY) == []
    assert store.deactivate_window("missing") is False
