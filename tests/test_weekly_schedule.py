"""
Tests for per-weekday slot management.
"""

from __future__ import annotations

import pytest

from app.application.exceptions import DuplicateSlotError, InvalidRangeError
from app.application.use_cases.weekly_schedule_store import WeeklyScheduleStore, default_weekly_schedule
from app.application.utils.time_slots import parse_time_of_day
from app.infrastructure.store.memory_store import MemoryBookingStore

STORE = "store-1"


class CountingStore(MemoryBookingStore):
    def __init__(self) -> None:
        super().__init__()
        self.saved = []

    def save_weekly_schedule(self, schedule) -> None:
        self.saved.append(schedule)
        super().save_weekly_schedule(schedule)


def make_store() -> WeeklyScheduleStore:
    return WeeklyScheduleStore(repository=MemoryBookingStore())


def assert_strictly_increasing(slots) -> None:
    minutes = [parse_time_of_day(s) for s in slots]
    assert minutes == sorted(set(minutes))


def test_default_schedule_weekdays_saturday_and_sunday():
    schedule = default_weekly_schedule(STORE)

    monday = schedule.slots_for(1)
    assert monday[0] == "08:00"
    assert monday[-1] == "18:30"
    assert len(monday) == 22
    assert schedule.slots_for(5) == monday
    assert schedule.slots_for(6) == ("09:00", "09:30", "10:00", "10:30", "11:00", "11:30",
                                     "12:00", "12:30", "13:00", "13:30")
    assert schedule.slots_for(0) == ()


def test_unsaved_store_reads_default_schedule():
    store = make_store()
    assert store.get_slots_for_weekday(STORE, 1) == default_weekly_schedule(STORE).slots_for(1)
    assert store.get_slots_for_weekday(STORE, 0) == ()


def test_add_slot_inserts_in_order():
    store = make_store()
    store.apply_bulk_range(STORE, {2}, "09:00", "11:00", 60)

    slots = store.add_slot(STORE, 2, "09:30")

    assert slots == ("09:00", "09:30", "10:00")
    assert store.get_slots_for_weekday(STORE, 2) == slots


def test_add_duplicate_slot_fails_and_leaves_sequence_unchanged():
    store = make_store()
    before = store.get_slots_for_weekday(STORE, 1)

    with pytest.raises(DuplicateSlotError):
        store.add_slot(STORE, 1, "08:00")

    assert store.get_slots_for_weekday(STORE, 1) == before


def test_add_slot_to_closed_day():
    store = make_store()
    assert store.add_slot(STORE, 0, "10:00") == ("10:00",)


def test_remove_slot_is_idempotent():
    store = make_store()
    once = store.remove_slot(STORE, 1, "08:30")
    twice = store.remove_slot(STORE, 1, "08:30")

    assert "08:30" not in once
    assert once == twice
    assert store.get_slots_for_weekday(STORE, 1) == once


def test_remove_missing_slot_does_not_persist():
    repository = CountingStore()
    store = WeeklyScheduleStore(repository=repository)

    store.remove_slot(STORE, 0, "07:00")

    assert repository.saved == []


def test_replace_slot_moves_and_resorts():
    store = make_store()
    store.apply_bulk_range(STORE, {3}, "09:00", "12:00", 60)

    slots = store.replace_slot(STORE, 3, "09:00", "11:30")

    assert slots == ("10:00", "11:00", "11:30")


def test_replace_slot_onto_existing_time_fails():
    store = make_store()
    store.apply_bulk_range(STORE, {3}, "09:00", "12:00", 60)

    with pytest.raises(DuplicateSlotError):
        store.replace_slot(STORE, 3, "09:00", "10:00")

    assert store.get_slots_for_weekday(STORE, 3) == ("09:00", "10:00", "11:00")


def test_replace_slot_with_same_time_is_noop():
    store = make_store()
    before = store.get_slots_for_weekday(STORE, 1)
    assert store.replace_slot(STORE, 1, "08:00", "08:00") == before


def test_bulk_range_excludes_end_boundary():
    store = make_store()

    store.apply_bulk_range(STORE, {1, 2, 3, 4, 5}, "09:00", "12:00", 60)

    for weekday in (1, 2, 3, 4, 5):
        assert store.get_slots_for_weekday(STORE, weekday) == ("09:00", "10:00", "11:00")
    assert len(store.get_slots_for_weekday(STORE, 6)) == 10


@pytest.mark.parametrize("start,end", [("12:00", "09:00"), ("09:00", "09:00")])
def test_bulk_range_rejects_empty_or_inverted_range(start, end):
    store = make_store()
    with pytest.raises(InvalidRangeError):
        store.apply_bulk_range(STORE, {1}, start, end, 30)


def test_bulk_range_rejects_non_positive_step():
    store = make_store()
    with pytest.raises(InvalidRangeError):
        store.apply_bulk_range(STORE, {1}, "09:00", "10:00", 0)


def test_invalid_weekday_and_time_are_value_errors():
    store = make_store()
    with pytest.raises(ValueError):
        store.get_slots_for_weekday(STORE, 7)
    with pytest.raises(ValueError):
        store.add_slot(STORE, 1, "25:00")
    with pytest.raises(ValueError):
        store.add_slot(STORE, 1, "9:00")


@pytest.mark.parametrize("weekday", [True, False, 1.0, "1", -1, 7])
def test_weekday_must_be_a_plain_int_in_range(weekday):
    store = make_store()
    with pytest.raises(ValueError):
        store.get_slots_for_weekday(STORE, weekday)
    with pytest.raises(ValueError):
        store.add_slot(STORE, weekday, "07:00")


def test_add_slot_to_several_weekdays_skips_existing():
    store = make_store()

    schedule = store.add_slot_to_weekdays(STORE, [0, 1, 6], "08:00")

    assert schedule.slots_for(0) == ("08:00",)
    assert schedule.slots_for(1).count("08:00") == 1
    assert schedule.slots_for(6)[0] == "08:00"


def test_every_mutation_persists_the_whole_schedule():
    repository = CountingStore()
    store = WeeklyScheduleStore(repository=repository)

    store.add_slot(STORE, 0, "10:00")
    store.replace_slot(STORE, 0, "10:00", "11:00")
    store.apply_bulk_range(STORE, {2}, "10:00", "11:00", 30)

    assert len(repository.saved) == 3
    for saved in repository.saved:
        assert set(saved.per_weekday) == set(range(7))
    assert repository.saved[-1].slots_for(0) == ("11:00",)
    assert repository.saved[-1].slots_for(1) == default_weekly_schedule(STORE).slots_for(1)


def test_slots_stay_strictly_increasing_after_mixed_operations():
    store = make_store()
    store.apply_bulk_range(STORE, {4}, "13:00", "15:00", 20)
    store.add_slot(STORE, 4, "07:45")
    store.replace_slot(STORE, 4, "13:40", "23:59")
    store.remove_slot(STORE, 4, "14:00")
    store.add_slot(STORE, 4, "14:00")
    store.add_slot_to_weekdays(STORE, [4, 5], "12:15")

    for weekday in range(7):
        assert_strictly_increasing(store.get_slots_for_weekday(STORE, weekday))


def test_reset_and_delete_schedule():
    store = make_store()
    store.apply_bulk_range(STORE, {1}, "10:00", "11:00", 30)

    store.reset_to_defaults(STORE)
    assert store.get_slots_for_weekday(STORE, 1) == default_weekly_schedule(STORE).slots_for(1)

    store.add_slot(STORE, 0, "09:00")
    store.delete_schedule(STORE)
    assert store.get_slots_for_weekday(STORE, 0) == ()
