from __future__ import annotations

import logging
import threading
from typing import Iterable

from app.application.exceptions import DuplicateSlotError, InvalidRangeError
from app.application.ports.schedule_repository import ScheduleRepositoryPort
from app.application.utils.time_slots import (
    generate_range,
    normalize_time,
    parse_time_of_day,
    sorted_slots,
    validate_weekday,
)
from app.domain.entities.weekly_schedule import WeeklySchedule


def default_weekly_schedule(store_id: str, step_minutes: int = 30) -> WeeklySchedule:
    """Onboarding schedule: Mon-Fri 08:00-19:00, Sat 09:00-14:00, Sun closed."""
    weekdays = generate_range("08:00", "19:00", step_minutes)
    saturday = generate_range("09:00", "14:00", step_minutes)
    per_weekday = {0: ()}
    for day in range(1, 6):
        per_weekday[day] = weekdays
    per_weekday[6] = saturday
    return WeeklySchedule(store_id=store_id, per_weekday=per_weekday)


class WeeklyScheduleStore:
    """
    Owns the per-weekday slot sequences of every store.

    Every mutation is a read-modify-write of the whole schedule under a
    per-store lock, then the full map is persisted. Readers only ever see a
    complete schedule, so replace_slot never exposes a day without the slot.
    """

    def __init__(self, repository: ScheduleRepositoryPort, default_step_minutes: int = 30) -> None:
        self._repository = repository
        self._default_step_minutes = default_step_minutes
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, store_id: str) -> threading.Lock:
        with self._lock_lock:
            if store_id not in self._locks:
                self._locks[store_id] = threading.Lock()
            return self._locks[store_id]

    def get_schedule(self, store_id: str) -> WeeklySchedule:
        schedule = self._repository.load_weekly_schedule(store_id)
        if schedule is None:
            return default_weekly_schedule(store_id, self._default_step_minutes)
        return schedule

    def get_slots_for_weekday(self, store_id: str, weekday: int) -> tuple[str, ...]:
        validate_weekday(weekday)
        return self.get_schedule(store_id).slots_for(weekday)

    def add_slot(self, store_id: str, weekday: int, time: str) -> tuple[str, ...]:
        validate_weekday(weekday)
        time = normalize_time(time)
        with self._get_lock(store_id):
            schedule = self.get_schedule(store_id)
            current = schedule.slots_for(weekday)
            if time in current:
                raise DuplicateSlotError(weekday, time)
            updated = sorted_slots(current + (time,))
            self._save(schedule.with_weekday(weekday, updated))
        self._logger.info("Slot added", extra={"store_id": store_id, "weekday": weekday, "time": time})
        return updated

    def add_slot_to_weekdays(self, store_id: str, weekdays: Iterable[int], time: str) -> WeeklySchedule:
        """Add time to each weekday, skipping those that already have it."""
        days = sorted({validate_weekday(day) for day in weekdays})
        time = normalize_time(time)
        with self._get_lock(store_id):
            schedule = self.get_schedule(store_id)
            for day in days:
                current = schedule.slots_for(day)
                if time not in current:
                    schedule = schedule.with_weekday(day, sorted_slots(current + (time,)))
            self._save(schedule)
        self._logger.info("Slot added to weekdays", extra={"store_id": store_id, "time": time, "weekday": days})
        return schedule

    def remove_slot(self, store_id: str, weekday: int, time: str) -> tuple[str, ...]:
        validate_weekday(weekday)
        time = normalize_time(time)
        with self._get_lock(store_id):
            schedule = self.get_schedule(store_id)
            current = schedule.slots_for(weekday)
            if time not in current:
                return current
            updated = tuple(slot for slot in current if slot != time)
            self._save(schedule.with_weekday(weekday, updated))
        self._logger.info("Slot removed", extra={"store_id": store_id, "weekday": weekday, "time": time})
        return updated

    def replace_slot(self, store_id: str, weekday: int, old_time: str, new_time: str) -> tuple[str, ...]:
        validate_weekday(weekday)
        old_time = normalize_time(old_time)
        new_time = normalize_time(new_time)
        with self._get_lock(store_id):
            schedule = self.get_schedule(store_id)
            current = schedule.slots_for(weekday)
            if new_time == old_time:
                return current
            if new_time in current:
                raise DuplicateSlotError(weekday, new_time)
            updated = sorted_slots([slot for slot in current if slot != old_time] + [new_time])
            self._save(schedule.with_weekday(weekday, updated))
        self._logger.info(
            "Slot replaced",
            extra={"store_id": store_id, "weekday": weekday, "time": f"{old_time}->{new_time}"},
        )
        return updated

    def apply_bulk_range(
        self,
        store_id: str,
        weekdays: Iterable[int],
        start: str,
        end: str,
        step_minutes: int,
    ) -> WeeklySchedule:
        days = sorted({validate_weekday(day) for day in weekdays})
        if parse_time_of_day(start) >= parse_time_of_day(end):
            raise InvalidRangeError(f"Start {start} must be before end {end}.")
        if step_minutes <= 0:
            raise InvalidRangeError("Step must be a positive number of minutes.")
        slots = generate_range(start, end, step_minutes)
        with self._get_lock(store_id):
            schedule = self.get_schedule(store_id)
            for day in days:
                schedule = schedule.with_weekday(day, slots)
            self._save(schedule)
        self._logger.info(
            "Bulk range applied",
            extra={"store_id": store_id, "weekday": days, "time": f"{start}-{end}/{step_minutes}"},
        )
        return schedule

    def reset_to_defaults(self, store_id: str) -> WeeklySchedule:
        schedule = default_weekly_schedule(store_id, self._default_step_minutes)
        with self._get_lock(store_id):
            self._save(schedule)
        self._logger.info("Schedule reset to defaults", extra={"store_id": store_id})
        return schedule

    def delete_schedule(self, store_id: str) -> None:
        with self._get_lock(store_id):
            self._repository.delete_weekly_schedule(store_id)
        self._logger.info("Schedule deleted", extra={"store_id": store_id})

    def _save(self, schedule: WeeklySchedule) -> None:
        self._repository.save_weekly_schedule(schedule)
