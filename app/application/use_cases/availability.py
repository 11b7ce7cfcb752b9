from __future__ import annotations

import logging
from dataclasses import replace

from app.application.exceptions import BookingConflictError, PlanLimitReachedError, SlotNotOfferedError
from app.application.ports.appointment_repository import AppointmentRepositoryPort
from app.application.use_cases.appointment_lifecycle import AppointmentLifecycle
from app.application.use_cases.reporting import month_window
from app.application.use_cases.slot_computer import compute_slots
from app.application.use_cases.weekly_schedule_store import WeeklyScheduleStore
from app.application.utils.time_slots import normalize_time, parse_calendar_date, week_dates, weekday_index
from app.domain.entities.appointment import Appointment, AppointmentDraft
from app.domain.entities.slot_availability import SlotAvailability


class AvailabilityService:
    def __init__(
        self,
        schedules: WeeklyScheduleStore,
        appointments: AppointmentRepositoryPort,
        lifecycle: AppointmentLifecycle,
        cancelled_blocks_slot: bool = True,
        duration_aware: bool = False,
        monthly_booking_limit: int | None = None,
    ) -> None:
        self._schedules = schedules
        self._appointments = appointments
        self._lifecycle = lifecycle
        self._cancelled_blocks_slot = cancelled_blocks_slot
        self._duration_aware = duration_aware
        self._monthly_booking_limit = monthly_booking_limit
        self._logger = logging.getLogger(__name__)

    def get_availability(self, store_id: str, date: str) -> list[SlotAvailability]:
        day = parse_calendar_date(date)
        slots = self._schedules.get_slots_for_weekday(store_id, weekday_index(day))
        booked = self._appointments.find_by_store_and_date(store_id, date)
        return compute_slots(
            slots,
            booked,
            cancelled_blocks_slot=self._cancelled_blocks_slot,
            duration_aware=self._duration_aware,
        )

    def get_week_overview(self, store_id: str, date: str) -> dict[str, list[SlotAvailability]]:
        """Availability for each day, Sunday to Saturday, of the week containing date."""
        return {
            day.isoformat(): self.get_availability(store_id, day.isoformat())
            for day in week_dates(parse_calendar_date(date))
        }

    def book_slot(self, store_id: str, date: str, time: str, draft: AppointmentDraft) -> Appointment:
        """
        Check the slot is free, then create the appointment.

        The check and the insert are not atomic; the repository's
        insert-if-absent guard rejects the loser of a race with the same
        BookingConflictError.
        """
        time = normalize_time(time)
        slots = {slot.time: slot for slot in self.get_availability(store_id, date)}
        if time not in slots:
            raise SlotNotOfferedError(f"{time} is not offered on {date}. Pick one of the listed slots.")
        if slots[time].booked:
            self._logger.info(
                "Booking conflict",
                extra={"store_id": store_id, "date": date, "time": time, "reason": "slot booked"},
            )
            raise BookingConflictError(date, time)

        self._check_monthly_limit(store_id, date)
        draft = replace(draft, store_id=store_id, date=date, time=time)
        return self._lifecycle.create(draft)

    def _check_monthly_limit(self, store_id: str, date: str) -> None:
        if self._monthly_booking_limit is None:
            return
        start, end = month_window(parse_calendar_date(date))
        start_iso, end_iso = start.isoformat(), end.isoformat()
        count = sum(1 for a in self._appointments.list_for_store(store_id) if start_iso <= a.date < end_iso)
        if count >= self._monthly_booking_limit:
            self._logger.info(
                "Monthly booking limit reached",
                extra={"store_id": store_id, "date": date, "reason": f"limit={self._monthly_booking_limit}"},
            )
            raise PlanLimitReachedError(
                f"This store has reached its limit of {self._monthly_booking_limit} bookings this month. "
                "Try another month or contact the store."
            )
