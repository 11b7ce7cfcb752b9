from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable

from app.application.exceptions import InvalidTransitionError, NotFoundError
from app.application.ports.appointment_repository import AppointmentRepositoryPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.application.utils.time_slots import normalize_time, parse_calendar_date
from app.domain.entities.appointment import Appointment, AppointmentDraft, AppointmentStatus

AppointmentListener = Callable[[Appointment], None]

ALLOWED_TRANSITIONS: dict[AppointmentStatus, frozenset[AppointmentStatus]] = {
    AppointmentStatus.pending: frozenset({AppointmentStatus.confirmed, AppointmentStatus.cancelled}),
    AppointmentStatus.confirmed: frozenset(
        {AppointmentStatus.completed, AppointmentStatus.cancelled, AppointmentStatus.pending}
    ),
    AppointmentStatus.completed: frozenset(),
    AppointmentStatus.cancelled: frozenset(),
}


def can_transition(current: AppointmentStatus, requested: AppointmentStatus) -> bool:
    return requested == current or requested in ALLOWED_TRANSITIONS[current]


class AppointmentLifecycle:
    def __init__(
        self,
        appointments: AppointmentRepositoryPort,
        catalog: ServiceCatalogPort,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._appointments = appointments
        self._catalog = catalog
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._listeners: list[AppointmentListener] = []
        self._logger = logging.getLogger(__name__)

    def subscribe(self, listener: AppointmentListener) -> None:
        """Register a callback run synchronously after every change."""
        self._listeners.append(listener)

    def create(self, draft: AppointmentDraft) -> Appointment:
        """
        Create a pending appointment from a draft.

        Only the shape of date and time is validated; whether the time is a
        configured slot and whether it is free is the caller's concern.
        """
        parse_calendar_date(draft.date)
        time = normalize_time(draft.time)
        if not (draft.customer_name or "").strip():
            raise ValueError("Customer name is required")
        if not (draft.customer_phone or "").strip():
            raise ValueError("Customer phone is required")

        service = self._catalog.get_service(draft.service_id)
        if service is None or service.store_id != draft.store_id:
            raise NotFoundError(f"Service {draft.service_id} not found")
        if not service.is_active:
            raise ValueError(f"Service {service.name} is not available for booking")

        now = self._clock()
        appointment = Appointment(
            id=uuid.uuid4().hex,
            store_id=draft.store_id,
            customer_name=draft.customer_name.strip(),
            customer_phone=draft.customer_phone.strip(),
            customer_email=draft.customer_email,
            notes=draft.notes,
            service_id=service.id,
            service_name=service.name,
            service_duration=service.duration,
            service_price=service.price,
            date=draft.date,
            time=time,
            status=AppointmentStatus.pending,
            created_at=now,
            updated_at=now,
        )
        created = self._appointments.insert(appointment)
        self._logger.info(
            "Appointment created",
            extra={
                "store_id": created.store_id,
                "appointment_id": created.id,
                "date": created.date,
                "time": created.time,
                "service": created.service_name,
            },
        )
        self._notify(created)
        return created

    def get(self, appointment_id: str) -> Appointment:
        appointment = self._appointments.get(appointment_id)
        if appointment is None:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        return appointment

    def list_for_store(
        self,
        store_id: str,
        date: str | None = None,
        status: AppointmentStatus | None = None,
    ) -> list[Appointment]:
        if date is not None:
            parse_calendar_date(date)
        appointments = self._appointments.list_for_store(store_id, date=date, status=status)
        return sorted(appointments, key=lambda a: (a.date, a.time))

    def transition(self, appointment: Appointment | str, new_status: AppointmentStatus | str) -> Appointment:
        """
        Move an appointment to new_status, checked against the stored record.

        The passed object only identifies the appointment; its status may be
        stale. The repository write is a compare-and-set on the stored status,
        so a concurrent change between the read and the write is rejected too.
        """
        appointment_id = appointment if isinstance(appointment, str) else appointment.id
        new_status = AppointmentStatus(new_status)
        stored = self.get(appointment_id)
        current = stored.status

        if new_status == current:
            return stored
        if not can_transition(current, new_status):
            self._logger.info(
                "Rejected status transition",
                extra={
                    "appointment_id": appointment_id,
                    "status": new_status.value,
                    "reason": f"from {current.value}",
                },
            )
            raise InvalidTransitionError(current.value, new_status.value)

        updated = self._appointments.update_status(appointment_id, new_status, expected_status=current)
        self._logger.info(
            "Appointment status changed",
            extra={
                "store_id": updated.store_id,
                "appointment_id": updated.id,
                "status": updated.status.value,
            },
        )
        self._notify(updated)
        return updated

    def confirm(self, appointment: Appointment | str) -> Appointment:
        return self.transition(appointment, AppointmentStatus.confirmed)

    def complete(self, appointment: Appointment | str) -> Appointment:
        return self.transition(appointment, AppointmentStatus.completed)

    def cancel(self, appointment: Appointment | str) -> Appointment:
        return self.transition(appointment, AppointmentStatus.cancelled)

    def revert_to_pending(self, appointment: Appointment | str) -> Appointment:
        return self.transition(appointment, AppointmentStatus.pending)

    def delete(self, appointment: Appointment | str) -> None:
        """Administrative removal. Not part of the customer flow; cancel instead."""
        if isinstance(appointment, str):
            appointment = self.get(appointment)
        if not self._appointments.delete(appointment.id):
            raise NotFoundError(f"Appointment {appointment.id} not found")
        self._logger.warning(
            "Appointment deleted",
            extra={"store_id": appointment.store_id, "appointment_id": appointment.id},
        )
        self._notify(appointment)

    def _notify(self, appointment: Appointment) -> None:
        # The change is already persisted when listeners run
        for listener in self._listeners:
            try:
                listener(appointment)
            except Exception:
                self._logger.exception(
                    "Appointment listener failed",
                    extra={"store_id": appointment.store_id, "appointment_id": appointment.id},
                )
