"""Process-wide logging for the booking service."""

import logging
import sys
from typing import Iterable

BOOKING_CONTEXT_FIELDS = (
    "store_id",
    "appointment_id",
    "service",
    "weekday",
    "date",
    "time",
    "status",
    "reason",
)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class BookingLogFormatter(logging.Formatter):
    """
    Appends the booking fields passed through `extra=` to each line.

    Given logger.info("Slot added", extra={"store_id": "s1", "weekday": [1, 2]})
    the line ends with `[store_id=s1 weekday=1,2]`.
    """

    def __init__(
        self,
        fields: Iterable[str] = BOOKING_CONTEXT_FIELDS,
        fmt: str = LOG_FORMAT,
        datefmt: str = DATE_FORMAT,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.fields = tuple(fields)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = " ".join(
            f"{field}={_render(record.__dict__[field])}"
            for field in self.fields
            if record.__dict__.get(field) not in (None, "", [], ())
        )
        return f"{line} [{context}]" if context else line


def _render(value) -> str:
    if isinstance(value, (list, tuple, set, frozenset)):
        return ",".join(str(item) for item in value)
    return str(value)


def configure_logging(level: str = "INFO") -> logging.Handler:
    """Route the root logger to stdout through BookingLogFormatter. Safe to call twice."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for existing in list(root.handlers):
        if isinstance(existing.formatter, BookingLogFormatter):
            root.removeHandler(existing)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(BookingLogFormatter())
    root.addHandler(console)
    return console
