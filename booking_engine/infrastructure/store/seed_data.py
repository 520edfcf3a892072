from __future__ import annotations

from datetime import time

from booking_engine.domain.entities.availability_window import AvailabilityWindow
from booking_engine.domain.entities.provider import Provider
from booking_engine.domain.entities.service import Service
from booking_engine.infrastructure.store.memory_store import MemorySchedulingStore

SEED_PROVIDERS = [
    Provider(id="prov_sparkle", display_name="Sparkle Home Cleaning", rating=4.8),
    Provider(id="prov_fresh", display_name="Fresh Start Cleaners", rating=4.3),
    Provider(id="prov_fixit", display_name="Fix-It Handyman Co.", rating=4.6),
]

SEED_SERVICES = [
    Service(id="svc_sparkle_deep", provider_id="prov_sparkle", name="Deep Clean", category="cleaning", duration_minutes=120),
    Service(id="svc_sparkle_std", provider_id="prov_sparkle", name="Standard Clean", category="cleaning", duration_minutes=60),
    Service(id="svc_fresh_deep", provider_id="prov_fresh", name="Deep Clean", category="cleaning", duration_minutes=120),
    Service(id="svc_fixit_repair", provider_id="prov_fixit", name="General Repair", category="handyman", duration_minutes=90),
]

# (provider_id, weekdays, start, end)
_SEED_HOURS = [
    ("prov_sparkle", range(0, 5), time(9, 0), time(13, 0)),
    ("prov_sparkle", range(0, 5), time(14, 0), time(18, 0)),
    ("prov_fresh", range(0, 6), time(8, 0), time(16, 0)),
    ("prov_fixit", range(1, 6), time(10, 0), time(19, 0)),
]


def build_seeded_store() -> MemorySchedulingStore:
    """Memory store pre-filled with demo providers for local development."""
    store = MemorySchedulingStore()
    for provider in SEED_PROVIDERS:
        store.add_provider(provider)
    for service in SEED_SERVICES:
        store.add_service(service)
    for provider_id, weekdays, start, end in _SEED_HOURS:
        for weekday in weekdays:
            store.save_window(AvailabilityWindow(provider_id, weekday, start, end))
    return store
