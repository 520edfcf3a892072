import datetime as dt
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from booking_engine.api.v1.schemas import (
    BookingSchema,
    CreateBookingRequestSchema,
    CreateRecurringBookingRequestSchema,
    RecurringBookingResponseSchema,
    TimeSlotSchema,
)
from booking_engine.application.exceptions import SchedulingRejected, StoreUnavailableError
from booking_engine.application.use_cases.alternative_finder import AlternativeFinderUseCase
from booking_engine.application.use_cases.booking_transaction import BookingTransactionManager
from booking_engine.application.use_cases.slot_generator import SlotGeneratorUseCase
from booking_engine.core.config import settings
from booking_engine.domain.entities.recurrence import RecurrencePattern
from booking_engine.domain.entities.rejection import RejectionReason
from booking_engine.wiring.dependencies import (
    get_alternative_finder,
    get_slot_generator,
    get_transaction_manager,
)

router = APIRouter()
logger = logging.getLogger(__name__)

_REJECTION_STATUS = {
    RejectionReason.PROVIDER_NOT_FOUND: 404,
    RejectionReason.SERVICE_INACTIVE: 422,
    RejectionReason.EMPTY_PATTERN: 422,
}


def _rejection(reason: RejectionReason, message: str) -> HTTPException:
    return HTTPException(
        status_code=_REJECTION_STATUS.get(reason, 409),
        detail={"reason": reason.value, "message": message},
    )


def _unavailable(e: StoreUnavailableError) -> HTTPException:
    logger.error("Backing store unavailable", extra={"error": str(e)})
    return HTTPException(status_code=503, detail=str(e))


@router.get("/providers/{provider_id}/slots", response_model=list[TimeSlotSchema])
def get_day_slots(
    provider_id: str,
    service_id: str = Query(...),
    date: dt.date = Query(...),
    uc: SlotGeneratorUseCase = Depends(get_slot_generator),
):
    try:
        slots = uc.generate_day(provider_id, service_id, date)
    except SchedulingRejected as e:
        raise _rejection(e.reason, str(e))
    except StoreUnavailableError as e:
        raise _unavailable(e)
    return [TimeSlotSchema.from_slot(s) for s in slots]


@router.get("/services/{service_id}/alternatives", response_model=list[TimeSlotSchema])
def get_alternatives(
    service_id: str,
    date: dt.date = Query(...),
    time: dt.time = Query(...),
    duration: int | None = Query(None, gt=0),
    max_results: int = Query(settings.ALTERNATIVE_MAX_RESULTS, ge=1, le=50),
    uc: AlternativeFinderUseCase = Depends(get_alternative_finder),
):
    try:
        slots = uc.find_alternatives(service_id, date, time, duration, max_results)
    except SchedulingRejected as e:
        raise _rejection(e.reason, str(e))
    except StoreUnavailableError as e:
        raise _unavailable(e)
    return [TimeSlotSchema.from_slot(s) for s in slots]


@router.post("/bookings", response_model=BookingSchema, status_code=201)
def create_booking(
    req: CreateBookingRequestSchema,
    manager: BookingTransactionManager = Depends(get_transaction_manager),
):
    try:
        result = manager.commit_single(
            provider_id=req.provider_id,
            service_id=req.service_id,
            customer_id=req.customer_id,
            booking_date=req.date,
            start_time=req.time,
            address=req.address,
            notes=req.notes,
        )
    except StoreUnavailableError as e:
        raise _unavailable(e)

    if result.booking is None:
        raise _rejection(result.reason, result.message or result.reason.value)
    return BookingSchema.from_booking(result.booking)


@router.post("/bookings/recurring", response_model=RecurringBookingResponseSchema)
def create_recurring_booking(
    req: CreateRecurringBookingRequestSchema,
    manager: BookingTransactionManager = Depends(get_transaction_manager),
):
    try:
        pattern = RecurrencePattern(
            recurrence_type=req.recurrence.type,
            anchor_date=req.date,
            anchor_time=req.time,
            end_date=req.recurrence.end_date,
            weekdays=tuple(req.recurrence.weekdays) if req.recurrence.weekdays else None,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        result = manager.commit_recurring(
            pattern,
            service_id=req.service_id,
            provider_id=req.provider_id,
            customer_id=req.customer_id,
            address=req.address,
            notes=req.notes,
        )
    except StoreUnavailableError as e:
        raise _unavailable(e)

    body = RecurringBookingResponseSchema.from_result(result)
    if result.error is not None:
        raise HTTPException(
            status_code=_REJECTION_STATUS[result.error],
            detail=body.model_dump(mode="json"),
        )
    return body
