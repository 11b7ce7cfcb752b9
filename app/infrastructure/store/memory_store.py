from __future__ import annotations

import threading
from datetime import datetime, timezone

from app.application.exceptions import BookingConflictError, InvalidTransitionError, NotFoundError
from app.application.ports.appointment_repository import AppointmentRepositoryPort
from app.application.ports.schedule_repository import ScheduleRepositoryPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.domain.entities.appointment import Appointment, AppointmentStatus
from app.domain.entities.service import Service
from app.domain.entities.weekly_schedule import WeeklySchedule


class MemoryBookingStore(AppointmentRepositoryPort, ServiceCatalogPort, ScheduleRepositoryPort):
    def __init__(self) -> None:
        self._appointments: dict[str, Appointment] = {}
        self._services: dict[str, Service] = {}
        self._schedules: dict[str, WeeklySchedule] = {}
        self._lock = threading.Lock()

    # Appointments

    def find_by_store_and_date(self, store_id: str, date: str) -> list[Appointment]:
        return [a for a in self._appointments.values() if a.store_id == store_id and a.date == date]

    def list_for_store(
        self,
        store_id: str,
        date: str | None = None,
        status: AppointmentStatus | None = None,
    ) -> list[Appointment]:
        return [
            a
            for a in self._appointments.values()
            if a.store_id == store_id
            and (date is None or a.date == date)
            and (status is None or a.status == status)
        ]

    def get(self, appointment_id: str) -> Appointment | None:
        return self._appointments.get(appointment_id)

    def insert(self, appointment: Appointment) -> Appointment:
        with self._lock:
            for existing in self._appointments.values():
                if (
                    existing.is_active
                    and existing.store_id == appointment.store_id
                    and existing.date == appointment.date
                    and existing.time == appointment.time
                ):
                    raise BookingConflictError(appointment.date, appointment.time)
            self._appointments[appointment.id] = appointment
            return appointment

    def update_status(
        self,
        appointment_id: str,
        status: AppointmentStatus,
        expected_status: AppointmentStatus | None = None,
    ) -> Appointment:
        with self._lock:
            current = self._appointments.get(appointment_id)
            if current is None:
                raise NotFoundError(f"Appointment {appointment_id} not found")
            if expected_status is not None and current.status != expected_status:
                raise InvalidTransitionError(current.status.value, status.value)
            updated = current.with_status(status, updated_at=datetime.now(timezone.utc))
            self._appointments[appointment_id] = updated
            return updated

    def delete(self, appointment_id: str) -> bool:
        with self._lock:
            return self._appointments.pop(appointment_id, None) is not None

    # Services

    def get_service(self, service_id: str) -> Service | None:
        return self._services.get(service_id)

    def list_services(self, store_id: str, include_inactive: bool = False) -> list[Service]:
        return [
            s for s in self._services.values() if s.store_id == store_id and (include_inactive or s.is_active)
        ]

    def save_service(self, service: Service) -> Service:
        with self._lock:
            self._services[service.id] = service
            return service

    # Weekly schedules

    def load_weekly_schedule(self, store_id: str) -> WeeklySchedule | None:
        return self._schedules.get(store_id)

    def save_weekly_schedule(self, schedule: WeeklySchedule) -> None:
        self._schedules[schedule.store_id] = schedule

    def delete_weekly_schedule(self, store_id: str) -> None:
        self._schedules.pop(store_id, None)
