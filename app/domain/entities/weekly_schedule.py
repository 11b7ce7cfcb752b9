from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

WEEKDAYS = range(7)  # 0 = Sunday ... 6 = Saturday


@dataclass(frozen=True)
class WeeklySchedule:
    store_id: str
    per_weekday: Mapping[int, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {day: tuple(self.per_weekday.get(day, ())) for day in WEEKDAYS}
        object.__setattr__(self, "per_weekday", MappingProxyType(frozen))

    def slots_for(self, weekday: int) -> tuple[str, ...]:
        return self.per_weekday.get(weekday, ())

    def with_weekday(self, weekday: int, slots: tuple[str, ...]) -> "WeeklySchedule":
        updated = dict(self.per_weekday)
        updated[weekday] = slots
        return WeeklySchedule(store_id=self.store_id, per_weekday=updated)

    def to_dict(self) -> dict[str, list[str]]:
        return {str(day): list(slots) for day, slots in self.per_weekday.items()}
