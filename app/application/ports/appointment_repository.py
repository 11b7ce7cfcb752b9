from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.appointment import Appointment, AppointmentStatus


class AppointmentRepositoryPort(ABC):
    @abstractmethod
    def find_by_store_and_date(self, store_id: str, date: str) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def list_for_store(
        self,
        store_id: str,
        date: str | None = None,
        status: AppointmentStatus | None = None,
    ) -> list[Appointment]:
        raise NotImplementedError

    @abstractmethod
    def get(self, appointment_id: str) -> Appointment | None:
        raise NotImplementedError

    @abstractmethod
    def insert(self, appointment: Appointment) -> Appointment:
        """
        Insert-if-absent: raises BookingConflictError when another non-cancelled
        appointment already holds (store_id, date, time).
        """
        raise NotImplementedError

    @abstractmethod
    def update_status(
        self,
        appointment_id: str,
        status: AppointmentStatus,
        expected_status: AppointmentStatus | None = None,
    ) -> Appointment:
        """
        Compare-and-set the status. Raises NotFoundError if the appointment does
        not exist, and InvalidTransitionError if expected_status is given and
        the stored status differs from it.
        """
        raise NotImplementedError

    @abstractmethod
    def delete(self, appointment_id: str) -> bool:
        """Returns True if a record was removed."""
        raise NotImplementedError
