from __future__ import annotations

from dataclasses import dataclass

from app.domain.entities.appointment import Appointment


@dataclass(frozen=True)
class SlotAvailability:
    time: str
    booked: bool
    appointment: Appointment | None = None
