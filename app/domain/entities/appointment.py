from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


ACTIVE_STATUSES = frozenset({AppointmentStatus.pending, AppointmentStatus.confirmed, AppointmentStatus.completed})


@dataclass(frozen=True)
class AppointmentDraft:
    store_id: str
    service_id: str
    customer_name: str
    customer_phone: str
    date: str  # YYYY-MM-DD
    time: str  # HH:MM
    customer_email: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class Appointment:
    id: str
    store_id: str
    customer_name: str
    customer_phone: str
    service_id: str
    # Snapshot of the service at booking time, never re-joined to the live service
    service_name: str
    service_duration: int
    service_price: Decimal
    date: str
    time: str
    status: AppointmentStatus = AppointmentStatus.pending
    customer_email: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def with_status(self, status: AppointmentStatus, updated_at: datetime | None = None) -> "Appointment":
        return replace(self, status=status, updated_at=updated_at or self.updated_at)
