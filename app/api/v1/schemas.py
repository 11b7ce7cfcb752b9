from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from app.domain.entities.appointment import Appointment
from app.domain.entities.dashboard_stats import CustomerSummary, DashboardStats
from app.domain.entities.service import Service
from app.domain.entities.slot_availability import SlotAvailability
from app.domain.entities.weekly_schedule import WeeklySchedule

TIME_REGEX = r"^([01]\d|2[0-3]):[0-5]\d$"
DATE_REGEX = r"^\d{4}-\d{2}-\d{2}$"


class AppointmentStatusSchema(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class WeeklyScheduleSchema(BaseModel):
    store_id: str
    weekly_time_slots: dict[int, list[str]]

    @staticmethod
    def from_entity(schedule: WeeklySchedule) -> "WeeklyScheduleSchema":
        return WeeklyScheduleSchema(
            store_id=schedule.store_id,
            weekly_time_slots={day: list(slots) for day, slots in schedule.per_weekday.items()},
        )


class WeekdaySlotsSchema(BaseModel):
    weekday: int
    slots: list[str]


class AddSlotRequestSchema(BaseModel):
    time: str = Field(pattern=TIME_REGEX)
    also_weekdays: list[int] = Field(default_factory=list)


class ReplaceSlotRequestSchema(BaseModel):
    new_time: str = Field(pattern=TIME_REGEX)


class BulkRangeRequestSchema(BaseModel):
    weekdays: list[int] = Field(min_length=1)
    start: str = Field(pattern=TIME_REGEX)
    end: str = Field(pattern=TIME_REGEX)
    step_minutes: int = 30


class AppointmentSchema(BaseModel):
    id: str
    store_id: str
    customer_name: str
    customer_phone: str
    customer_email: str | None = None
    notes: str | None = None
    service_id: str
    service_name: str
    service_duration: int
    service_price: Decimal
    date: str
    time: str
    status: AppointmentStatusSchema
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @staticmethod
    def from_entity(appointment: Appointment) -> "AppointmentSchema":
        return AppointmentSchema(
            id=appointment.id,
            store_id=appointment.store_id,
            customer_name=appointment.customer_name,
            customer_phone=appointment.customer_phone,
            customer_email=appointment.customer_email,
            notes=appointment.notes,
            service_id=appointment.service_id,
            service_name=appointment.service_name,
            service_duration=appointment.service_duration,
            service_price=appointment.service_price,
            date=appointment.date,
            time=appointment.time,
            status=AppointmentStatusSchema(appointment.status.value),
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )


class SlotSchema(BaseModel):
    time: str
    booked: bool
    appointment: AppointmentSchema | None = None

    @staticmethod
    def from_entity(slot: SlotAvailability, include_appointment: bool = False) -> "SlotSchema":
        return SlotSchema(
            time=slot.time,
            booked=slot.booked,
            appointment=(
                AppointmentSchema.from_entity(slot.appointment)
                if include_appointment and slot.appointment
                else None
            ),
        )


class AvailabilityResponseSchema(BaseModel):
    store_id: str
    date: str
    slots: list[SlotSchema]


class WeekAvailabilityResponseSchema(BaseModel):
    store_id: str
    days: dict[str, list[SlotSchema]]


class BookingRequestSchema(BaseModel):
    service_id: str
    date: str = Field(pattern=DATE_REGEX)
    time: str = Field(pattern=TIME_REGEX)
    customer_name: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)
    customer_email: str | None = None
    notes: str | None = None


class StatusUpdateRequestSchema(BaseModel):
    status: AppointmentStatusSchema


class ServiceSchema(BaseModel):
    id: str
    store_id: str
    name: str
    description: str
    duration: int
    price: Decimal
    currency: str
    is_active: bool

    @staticmethod
    def from_entity(service: Service) -> "ServiceSchema":
        return ServiceSchema(
            id=service.id,
            store_id=service.store_id,
            name=service.name,
            description=service.description,
            duration=service.duration,
            price=service.price,
            currency=service.currency,
            is_active=service.is_active,
        )


class ServiceCreateSchema(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    duration: int = Field(ge=0)
    price: Decimal = Field(ge=0)
    currency: str | None = None


class ServiceUpdateSchema(BaseModel):
    name: str | None = None
    description: str | None = None
    duration: int | None = Field(default=None, ge=0)
    price: Decimal | None = Field(default=None, ge=0)
    currency: str | None = None
    is_active: bool | None = None


class DashboardSchema(BaseModel):
    store_id: str
    reference_date: str
    appointments_today: int
    pending_count: int
    completed_count: int
    total_appointments: int
    total_revenue: Decimal
    revenue_week: Decimal
    revenue_month: Decimal
    completion_rate: float
    unique_customers: int

    @staticmethod
    def from_entity(stats: DashboardStats) -> "DashboardSchema":
        return DashboardSchema(**stats.__dict__)


class CustomerSummarySchema(BaseModel):
    customer_name: str
    customer_phone: str
    total_appointments: int
    total_spent: Decimal
    last_visit: str | None = None

    @staticmethod
    def from_entity(summary: CustomerSummary) -> "CustomerSummarySchema":
        return CustomerSummarySchema(**summary.__dict__)
