from __future__ import annotations

from typing import Iterable, Sequence

from app.application.utils.time_slots import parse_time_of_day
from app.domain.entities.appointment import Appointment, AppointmentStatus
from app.domain.entities.slot_availability import SlotAvailability


def compute_slots(
    weekday_slots: Sequence[str],
    appointments_on_date: Iterable[Appointment],
    *,
    cancelled_blocks_slot: bool = True,
    duration_aware: bool = False,
) -> list[SlotAvailability]:
    """
    Mark each configured slot as booked or available for one date.

    Slots are discrete points: by default an appointment only blocks the slot
    at its exact start time, whatever its status. Set cancelled_blocks_slot
    to False to free cancelled slots, and duration_aware to True to also block
    every slot inside [time, time + service_duration).
    """
    by_time: dict[str, Appointment] = {}
    for appointment in appointments_on_date:
        if not cancelled_blocks_slot and appointment.status == AppointmentStatus.cancelled:
            continue
        by_time[appointment.time] = appointment

    intervals: list[tuple[int, int, Appointment]] = []
    if duration_aware:
        for appointment in by_time.values():
            start = parse_time_of_day(appointment.time)
            intervals.append((start, start + max(appointment.service_duration, 1), appointment))

    result: list[SlotAvailability] = []
    for slot in weekday_slots:
        appointment = by_time.get(slot)
        if appointment is None and intervals:
            point = parse_time_of_day(slot)
            for start, end, candidate in intervals:
                if start <= point < end:
                    appointment = candidate
                    break
        result.append(SlotAvailability(time=slot, booked=appointment is not None, appointment=appointment))
    return result
