from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response

from app.api.v1.schemas import (
    AppointmentSchema,
    AppointmentStatusSchema,
    AvailabilityResponseSchema,
    BookingRequestSchema,
    SlotSchema,
    StatusUpdateRequestSchema,
    WeekAvailabilityResponseSchema,
)
from app.application.exceptions import (
    BookingConflictError,
    InvalidTransitionError,
    NotFoundError,
    PlanLimitReachedError,
    SlotNotOfferedError,
)
from app.application.use_cases.appointment_lifecycle import AppointmentLifecycle
from app.application.use_cases.availability import AvailabilityService
from app.domain.entities.appointment import AppointmentDraft, AppointmentStatus
from app.wiring.dependencies import get_appointment_lifecycle, get_availability_service

router = APIRouter()
logger = logging.getLogger(__name__)

ELEVATED_ROLES = {"admin", "admin_master"}


def get_actor_role(x_actor_role: str | None = Header(None)) -> str:
    """Role of the caller, as established upstream by the auth layer."""
    return (x_actor_role or "customer").strip().lower()


@router.get("/stores/{store_id}/availability", response_model=AvailabilityResponseSchema)
def get_availability(
    store_id: str,
    date: str = Query(...),
    role: str = Depends(get_actor_role),
    service: AvailabilityService = Depends(get_availability_service),
):
    try:
        slots = service.get_availability(store_id, date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    # Customers only see whether a slot is taken, not who took it
    include_appointment = role != "customer"
    return AvailabilityResponseSchema(
        store_id=store_id,
        date=date,
        slots=[SlotSchema.from_entity(s, include_appointment) for s in slots],
    )


@router.get("/stores/{store_id}/availability/week", response_model=WeekAvailabilityResponseSchema)
def get_week_availability(
    store_id: str,
    date: str = Query(...),
    role: str = Depends(get_actor_role),
    service: AvailabilityService = Depends(get_availability_service),
):
    try:
        days = service.get_week_overview(store_id, date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    include_appointment = role != "customer"
    return WeekAvailabilityResponseSchema(
        store_id=store_id,
        days={day: [SlotSchema.from_entity(s, include_appointment) for s in slots] for day, slots in days.items()},
    )


@router.post("/stores/{store_id}/bookings", response_model=AppointmentSchema, status_code=201)
def book_slot(
    store_id: str,
    req: BookingRequestSchema,
    service: AvailabilityService = Depends(get_availability_service),
):
    draft = AppointmentDraft(
        store_id=store_id,
        service_id=req.service_id,
        customer_name=req.customer_name,
        customer_phone=req.customer_phone,
        customer_email=req.customer_email,
        notes=req.notes,
        date=req.date,
        time=req.time,
    )
    try:
        appointment = service.book_slot(store_id, req.date, req.time, draft)
    except SlotNotOfferedError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except BookingConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PlanLimitReachedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return AppointmentSchema.from_entity(appointment)


@router.get("/stores/{store_id}/appointments", response_model=list[AppointmentSchema])
def list_appointments(
    store_id: str,
    date: str | None = None,
    status: AppointmentStatusSchema | None = None,
    lifecycle: AppointmentLifecycle = Depends(get_appointment_lifecycle),
):
    try:
        appointments = lifecycle.list_for_store(
            store_id,
            date=date,
            status=AppointmentStatus(status.value) if status else None,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [AppointmentSchema.from_entity(a) for a in appointments]


@router.put("/appointments/{appointment_id}/status", response_model=AppointmentSchema)
def update_status(
    appointment_id: str,
    req: StatusUpdateRequestSchema,
    lifecycle: AppointmentLifecycle = Depends(get_appointment_lifecycle),
):
    try:
        appointment = lifecycle.transition(appointment_id, AppointmentStatus(req.status.value))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return AppointmentSchema.from_entity(appointment)


@router.delete("/appointments/{appointment_id}", status_code=204)
def delete_appointment(
    appointment_id: str,
    role: str = Depends(get_actor_role),
    lifecycle: AppointmentLifecycle = Depends(get_appointment_lifecycle),
) -> Response:
    if role not in ELEVATED_ROLES:
        logger.warning(
            "Appointment delete denied",
            extra={"appointment_id": appointment_id, "reason": f"role={role}"},
        )
        raise HTTPException(status_code=403, detail="Only administrators can delete appointments. Cancel it instead.")
    try:
        lifecycle.delete(appointment_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)
