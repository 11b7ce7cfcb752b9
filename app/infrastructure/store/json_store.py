from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from app.application.exceptions import BookingConflictError, InvalidTransitionError, NotFoundError
from app.application.ports.appointment_repository import AppointmentRepositoryPort
from app.application.ports.schedule_repository import ScheduleRepositoryPort
from app.application.ports.service_catalog import ServiceCatalogPort
from app.domain.entities.appointment import Appointment, AppointmentStatus
from app.domain.entities.service import Service
from app.domain.entities.weekly_schedule import WeeklySchedule


class JsonBookingStore(AppointmentRepositoryPort, ServiceCatalogPort, ScheduleRepositoryPort):
    """One JSON document per store holding its schedule, services and appointments."""

    def __init__(self, data_dir: str = "./data/stores") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, store_id: str) -> threading.Lock:
        """Get or create a lock for a store_id."""
        with self._lock_lock:
            if store_id not in self._locks:
                self._locks[store_id] = threading.Lock()
            return self._locks[store_id]

    def _get_file_path(self, store_id: str) -> Path:
        return self._data_dir / f"{store_id}.json"

    def _load_store_data(self, store_id: str) -> dict[str, Any]:
        """Load store data from JSON file, return default if missing."""
        file_path = self._get_file_path(store_id)
        if not file_path.exists():
            return _empty_document(store_id)

        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data.setdefault("weekly_schedule", None)
        data.setdefault("services", {})
        data.setdefault("appointments", {})
        data.setdefault("version", 1)
        return data

    def _save_store_data(self, store_id: str, data: dict[str, Any]) -> None:
        """Save store data to JSON file atomically."""
        file_path = self._get_file_path(store_id)
        temp_path = file_path.with_suffix(".json.tmp")

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

    def _store_ids(self) -> list[str]:
        return [path.stem for path in self._data_dir.glob("*.json")]

    def _find_store_of(self, collection: str, record_id: str) -> str | None:
        # No global index: scan store documents for the record
        for store_id in self._store_ids():
            with self._get_lock(store_id):
                data = self._load_store_data(store_id)
            if record_id in data[collection]:
                return store_id
        return None

    # Appointments

    def find_by_store_and_date(self, store_id: str, date: str) -> list[Appointment]:
        return self.list_for_store(store_id, date=date)

    def list_for_store(
        self,
        store_id: str,
        date: str | None = None,
        status: AppointmentStatus | None = None,
    ) -> list[Appointment]:
        with self._get_lock(store_id):
            data = self._load_store_data(store_id)
        appointments = [_deserialize_appointment(raw) for raw in data["appointments"].values()]
        return [
            a
            for a in appointments
            if (date is None or a.date == date) and (status is None or a.status == status)
        ]

    def get(self, appointment_id: str) -> Appointment | None:
        store_id = self._find_store_of("appointments", appointment_id)
        if store_id is None:
            return None
        with self._get_lock(store_id):
            raw = self._load_store_data(store_id)["appointments"].get(appointment_id)
        return _deserialize_appointment(raw) if raw else None

    def insert(self, appointment: Appointment) -> Appointment:
        with self._get_lock(appointment.store_id):
            data = self._load_store_data(appointment.store_id)
            for raw in data["appointments"].values():
                existing = _deserialize_appointment(raw)
                if existing.is_active and existing.date == appointment.date and existing.time == appointment.time:
                    raise BookingConflictError(appointment.date, appointment.time)
            data["appointments"][appointment.id] = _serialize_appointment(appointment)
            self._save_store_data(appointment.store_id, data)
        return appointment

    def update_status(
        self,
        appointment_id: str,
        status: AppointmentStatus,
        expected_status: AppointmentStatus | None = None,
    ) -> Appointment:
        store_id = self._find_store_of("appointments", appointment_id)
        if store_id is None:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        with self._get_lock(store_id):
            data = self._load_store_data(store_id)
            raw = data["appointments"].get(appointment_id)
            if raw is None:
                raise NotFoundError(f"Appointment {appointment_id} not found")
            current = _deserialize_appointment(raw)
            if expected_status is not None and current.status != expected_status:
                raise InvalidTransitionError(current.status.value, status.value)
            updated = current.with_status(status, updated_at=datetime.now(timezone.utc))
            data["appointments"][appointment_id] = _serialize_appointment(updated)
            self._save_store_data(store_id, data)
        return updated

    def delete(self, appointment_id: str) -> bool:
        store_id = self._find_store_of("appointments", appointment_id)
        if store_id is None:
            return False
        with self._get_lock(store_id):
            data = self._load_store_data(store_id)
            removed = data["appointments"].pop(appointment_id, None)
            self._save_store_data(store_id, data)
        return removed is not None

    # Services

    def get_service(self, service_id: str) -> Service | None:
        store_id = self._find_store_of("services", service_id)
        if store_id is None:
            return None
        with self._get_lock(store_id):
            raw = self._load_store_data(store_id)["services"].get(service_id)
        return _deserialize_service(raw) if raw else None

    def list_services(self, store_id: str, include_inactive: bool = False) -> list[Service]:
        with self._get_lock(store_id):
            data = self._load_store_data(store_id)
        services = [_deserialize_service(raw) for raw in data["services"].values()]
        return [s for s in services if include_inactive or s.is_active]

    def save_service(self, service: Service) -> Service:
        with self._get_lock(service.store_id):
            data = self._load_store_data(service.store_id)
            data["services"][service.id] = _serialize_service(service)
            self._save_store_data(service.store_id, data)
        return service

    # Weekly schedules

    def load_weekly_schedule(self, store_id: str) -> WeeklySchedule | None:
        with self._get_lock(store_id):
            raw = self._load_store_data(store_id)["weekly_schedule"]
        if raw is None:
            return None
        return WeeklySchedule(
            store_id=store_id,
            per_weekday={int(day): tuple(slots) for day, slots in raw.items()},
        )

    def save_weekly_schedule(self, schedule: WeeklySchedule) -> None:
        with self._get_lock(schedule.store_id):
            data = self._load_store_data(schedule.store_id)
            data["weekly_schedule"] = schedule.to_dict()
            self._save_store_data(schedule.store_id, data)

    def delete_weekly_schedule(self, store_id: str) -> None:
        with self._get_lock(store_id):
            data = self._load_store_data(store_id)
            data["weekly_schedule"] = None
            self._save_store_data(store_id, data)
        self._logger.info("Weekly schedule removed from store document", extra={"store_id": store_id})


def _empty_document(store_id: str) -> dict[str, Any]:
    return {
        "store_id": store_id,
        "weekly_schedule": None,
        "services": {},
        "appointments": {},
        "version": 1,
    }


def _serialize_appointment(appointment: Appointment) -> dict[str, Any]:
    return {
        "id": appointment.id,
        "store_id": appointment.store_id,
        "customer_name": appointment.customer_name,
        "customer_phone": appointment.customer_phone,
        "customer_email": appointment.customer_email,
        "notes": appointment.notes,
        "service_id": appointment.service_id,
        "service_name": appointment.service_name,
        "service_duration": appointment.service_duration,
        "service_price": str(appointment.service_price),
        "date": appointment.date,
        "time": appointment.time,
        "status": appointment.status.value,
        "created_at": appointment.created_at.isoformat() if appointment.created_at else None,
        "updated_at": appointment.updated_at.isoformat() if appointment.updated_at else None,
    }


def _deserialize_appointment(data: dict[str, Any]) -> Appointment:
    return Appointment(
        id=data["id"],
        store_id=data["store_id"],
        customer_name=data["customer_name"],
        customer_phone=data["customer_phone"],
        customer_email=data.get("customer_email"),
        notes=data.get("notes"),
        service_id=data["service_id"],
        service_name=data["service_name"],
        service_duration=int(data["service_duration"]),
        service_price=Decimal(data["service_price"]),
        date=data["date"],
        time=data["time"],
        status=AppointmentStatus(data.get("status", "pending")),
        created_at=_parse_datetime(data.get("created_at")),
        updated_at=_parse_datetime(data.get("updated_at")),
    )


def _serialize_service(service: Service) -> dict[str, Any]:
    return {
        "id": service.id,
        "store_id": service.store_id,
        "name": service.name,
        "description": service.description,
        "duration": service.duration,
        "price": str(service.price),
        "currency": service.currency,
        "is_active": service.is_active,
    }


def _deserialize_service(data: dict[str, Any]) -> Service:
    return Service(
        id=data["id"],
        store_id=data["store_id"],
        name=data["name"],
        description=data.get("description", ""),
        duration=int(data["duration"]),
        price=Decimal(data["price"]),
        currency=data.get("currency", "BRL"),
        is_active=data.get("is_active", True),
    )


def _parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
