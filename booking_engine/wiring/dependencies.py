from functools import lru_cache
import logging
from pathlib import Path
from zoneinfo import ZoneInfo

from booking_engine.core.config import settings
from booking_engine.application.ports.availability_store import AvailabilityStorePort
from booking_engine.application.ports.booking_store import BookingStorePort
from booking_engine.application.ports.service_catalog import ServiceCatalogPort
from booking_engine.application.use_cases.alternative_finder import AlternativeFinderUseCase
from booking_engine.application.use_cases.booking_transaction import BookingTransactionManager
from booking_engine.application.use_cases.slot_generator import SlotGeneratorUseCase
from booking_engine.application.utils.calendar_math import parse_hours_range
from booking_engine.infrastructure.catalog.http_catalog import HttpServiceCatalog
from booking_engine.infrastructure.store.json_store import JsonBookingStore
from booking_engine.infrastructure.store.memory_store import MemorySchedulingStore
from booking_engine.infrastructure.store.seed_data import build_seeded_store


_scheduling_store: MemorySchedulingStore | None = None


def _is_local() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


def get_scheduling_store() -> MemorySchedulingStore:
    global _scheduling_store
    if _scheduling_store is None:
        if _is_local():
            _scheduling_store = build_seeded_store()
        else:
            _scheduling_store = MemorySchedulingStore()
    return _scheduling_store


def get_availability_store() -> AvailabilityStorePort:
    return get_scheduling_store()


@lru_cache
def get_service_catalog() -> ServiceCatalogPort:
    if not settings.CATALOG_BASE_URL or _is_local():
        return get_scheduling_store()
    return HttpServiceCatalog()


@lru_cache
def get_booking_store() -> BookingStorePort:
    if settings.STORE_PROVIDER.lower() == "json":
        return JsonBookingStore(data_dir=str(Path(settings.DATA_DIR) / "bookings"))
    return get_scheduling_store()


@lru_cache
def get_slot_generator() -> SlotGeneratorUseCase:
    default_hours = None
    if settings.DEFAULT_BUSINESS_HOURS:
        try:
            default_hours = parse_hours_range(settings.DEFAULT_BUSINESS_HOURS)
        except ValueError as e:
            logger = logging.getLogger(__name__)
            logger.warning("Ignoring DEFAULT_BUSINESS_HOURS", extra={"error": str(e)})
    return SlotGeneratorUseCase(
        availability=get_availability_store(),
        catalog=get_service_catalog(),
        bookings=get_booking_store(),
        timezone=ZoneInfo(settings.BUSINESS_TIMEZONE),
        step_minutes=settings.SLOT_STEP_MINUTES,
        min_lead_minutes=settings.MIN_LEAD_MINUTES,
        default_hours=default_hours,
    )


@lru_cache
def get_alternative_finder() -> AlternativeFinderUseCase:
    return AlternativeFinderUseCase(
        slot_generator=get_slot_generator(),
        catalog=get_service_catalog(),
        horizon_days=settings.ALTERNATIVE_HORIZON_DAYS,
        same_day_limit=settings.ALTERNATIVE_SAME_DAY_LIMIT,
    )


@lru_cache
def get_transaction_manager() -> BookingTransactionManager:
    # One instance per process: every booking write must share its lock table
    return BookingTransactionManager(
        slot_generator=get_slot_generator(),
        bookings=get_booking_store(),
        max_occurrences=settings.RECURRENCE_MAX_OCCURRENCES,
    )
