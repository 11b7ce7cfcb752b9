from __future__ import annotations

from abc import ABC, abstractmethod

from app.domain.entities.weekly_schedule import WeeklySchedule


class ScheduleRepositoryPort(ABC):
    @abstractmethod
    def load_weekly_schedule(self, store_id: str) -> WeeklySchedule | None:
        """Returns None for a store that never saved a schedule."""
        raise NotImplementedError

    @abstractmethod
    def save_weekly_schedule(self, schedule: WeeklySchedule) -> None:
        """Persist the full per-weekday map, replacing what was stored."""
        raise NotImplementedError

    @abstractmethod
    def delete_weekly_schedule(self, store_id: str) -> None:
        raise NotImplementedError
