from functools import lru_cache
import logging
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.application.use_cases.appointment_lifecycle import AppointmentLifecycle
from app.application.use_cases.availability import AvailabilityService
from app.application.use_cases.manage_services import ManageServicesUseCase
from app.application.use_cases.reporting import ReconciliationReporting
from app.application.use_cases.weekly_schedule_store import WeeklyScheduleStore
from app.infrastructure.store.json_store import JsonBookingStore
from app.infrastructure.store.memory_store import MemoryBookingStore


@lru_cache
def get_booking_store() -> MemoryBookingStore | JsonBookingStore:
    logger = logging.getLogger(__name__)
    provider = settings.STORE_PROVIDER.lower()
    if provider == "json":
        logger.info("Using JsonBookingStore at %s", settings.DATA_DIR)
        return JsonBookingStore(data_dir=settings.DATA_DIR)
    if provider != "memory":
        raise ValueError(f"Unknown STORE_PROVIDER {settings.STORE_PROVIDER!r}, expected 'memory' or 'json'")
    logger.info("Using MemoryBookingStore (ENV=%s)", settings.ENV)
    return MemoryBookingStore()


@lru_cache
def get_schedule_store() -> WeeklyScheduleStore:
    return WeeklyScheduleStore(
        repository=get_booking_store(),
        default_step_minutes=settings.DEFAULT_SLOT_STEP_MINUTES,
    )


@lru_cache
def get_reporting() -> ReconciliationReporting:
    return ReconciliationReporting(
        appointments=get_booking_store(),
        timezone=ZoneInfo(settings.BUSINESS_TIMEZONE),
    )


@lru_cache
def get_appointment_lifecycle() -> AppointmentLifecycle:
    lifecycle = AppointmentLifecycle(appointments=get_booking_store(), catalog=get_booking_store())
    lifecycle.subscribe(get_reporting().on_appointment_changed)
    return lifecycle


@lru_cache
def get_availability_service() -> AvailabilityService:
    return AvailabilityService(
        schedules=get_schedule_store(),
        appointments=get_booking_store(),
        lifecycle=get_appointment_lifecycle(),
        cancelled_blocks_slot=settings.CANCELLED_APPOINTMENTS_BLOCK_SLOTS,
        duration_aware=settings.DURATION_AWARE_SLOTS,
        monthly_booking_limit=settings.MONTHLY_BOOKING_LIMIT,
    )


@lru_cache
def get_manage_services_use_case() -> ManageServicesUseCase:
    return ManageServicesUseCase(catalog=get_booking_store(), default_currency=settings.DEFAULT_CURRENCY)


def reset_container() -> None:
    """Drop cached singletons so the next request rebuilds them from settings."""
    for factory in (
        get_booking_store,
        get_schedule_store,
        get_reporting,
        get_appointment_lifecycle,
        get_availability_service,
        get_manage_services_use_case,
    ):
        factory.cache_clear()
