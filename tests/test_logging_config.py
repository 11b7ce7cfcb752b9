"""
Tests for the log line format.
"""

from __future__ import annotations

import logging

from app.core.logging_config import BookingLogFormatter, configure_logging


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("app.booking", logging.INFO, __file__, 1, "Slot added", None, None)
    record.__dict__.update(extra)
    return record


def test_booking_fields_are_appended_in_declared_order():
    formatter = BookingLogFormatter(fmt="%(message)s")

    line = formatter.format(make_record(weekday=[1, 2], store_id="s1", time="08:00", reason=""))

    assert line == "Slot added [store_id=s1 weekday=1,2 time=08:00]"


def test_line_without_booking_fields_is_left_alone():
    formatter = BookingLogFormatter(fmt="%(levelname)s %(message)s")
    assert formatter.format(make_record(unrelated="x")) == "INFO Slot added"


def test_configure_logging_replaces_its_own_handler():
    root = logging.getLogger()
    previous_level = root.level
    try:
        first = configure_logging("debug")
        second = configure_logging("warning")

        assert first not in root.handlers
        assert second in root.handlers
        assert root.level == logging.WARNING
    finally:
        root.removeHandler(second)
        root.setLevel(previous_level)
