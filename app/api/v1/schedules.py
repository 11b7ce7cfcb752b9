from fastapi import APIRouter, Depends, HTTPException

from app.api.v1.schemas import (
    AddSlotRequestSchema,
    BulkRangeRequestSchema,
    ReplaceSlotRequestSchema,
    WeekdaySlotsSchema,
    WeeklyScheduleSchema,
)
from app.application.exceptions import DuplicateSlotError, InvalidRangeError
from app.application.use_cases.weekly_schedule_store import WeeklyScheduleStore
from app.application.utils.time_slots import validate_weekday
from app.wiring.dependencies import get_schedule_store

router = APIRouter()


@router.get("/stores/{store_id}/schedule", response_model=WeeklyScheduleSchema)
def get_schedule(store_id: str, schedules: WeeklyScheduleStore = Depends(get_schedule_store)):
    return WeeklyScheduleSchema.from_entity(schedules.get_schedule(store_id))


@router.get("/stores/{store_id}/schedule/{weekday}", response_model=WeekdaySlotsSchema)
def get_weekday_slots(store_id: str, weekday: int, schedules: WeeklyScheduleStore = Depends(get_schedule_store)):
    try:
        slots = schedules.get_slots_for_weekday(store_id, weekday)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return WeekdaySlotsSchema(weekday=weekday, slots=list(slots))


@router.post("/stores/{store_id}/schedule/{weekday}/slots", response_model=WeeklyScheduleSchema, status_code=201)
def add_slot(
    store_id: str,
    weekday: int,
    req: AddSlotRequestSchema,
    schedules: WeeklyScheduleStore = Depends(get_schedule_store),
):
    try:
        for day in req.also_weekdays:
            validate_weekday(day)
        schedules.add_slot(store_id, weekday, req.time)
        extra_days = [day for day in req.also_weekdays if day != weekday]
        if extra_days:
            schedules.add_slot_to_weekdays(store_id, extra_days, req.time)
        schedule = schedules.get_schedule(store_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateSlotError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return WeeklyScheduleSchema.from_entity(schedule)


@router.put("/stores/{store_id}/schedule/{weekday}/slots/{time}", response_model=WeekdaySlotsSchema)
def replace_slot(
    store_id: str,
    weekday: int,
    time: str,
    req: ReplaceSlotRequestSchema,
    schedules: WeeklyScheduleStore = Depends(get_schedule_store),
):
    try:
        slots = schedules.replace_slot(store_id, weekday, time, req.new_time)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateSlotError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return WeekdaySlotsSchema(weekday=weekday, slots=list(slots))


@router.delete("/stores/{store_id}/schedule/{weekday}/slots/{time}", response_model=WeekdaySlotsSchema)
def remove_slot(
    store_id: str,
    weekday: int,
    time: str,
    schedules: WeeklyScheduleStore = Depends(get_schedule_store),
):
    try:
        slots = schedules.remove_slot(store_id, weekday, time)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return WeekdaySlotsSchema(weekday=weekday, slots=list(slots))


@router.post("/stores/{store_id}/schedule/bulk", response_model=WeeklyScheduleSchema)
def apply_bulk_range(
    store_id: str,
    req: BulkRangeRequestSchema,
    schedules: WeeklyScheduleStore = Depends(get_schedule_store),
):
    try:
        schedule = schedules.apply_bulk_range(store_id, req.weekdays, req.start, req.end, req.step_minutes)
    except (ValueError, InvalidRangeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return WeeklyScheduleSchema.from_entity(schedule)


@router.post("/stores/{store_id}/schedule/reset", response_model=WeeklyScheduleSchema)
def reset_schedule(store_id: str, schedules: WeeklyScheduleStore = Depends(get_schedule_store)):
    return WeeklyScheduleSchema.from_entity(schedules.reset_to_defaults(store_id))
