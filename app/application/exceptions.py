
class DuplicateSlotError(RuntimeError):
    """Raised when a time slot is already configured for the weekday."""

    def __init__(self, weekday: int, time: str) -> None:
        super().__init__(f"{time} is already in the schedule for this day.")
        self.weekday = weekday
        self.time = time


class InvalidRangeError(RuntimeError):
    """Raised when a bulk slot range has start >= end or a non-positive step."""
    pass


class InvalidTransitionError(RuntimeError):
    """Raised when an appointment status change is not allowed."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"An appointment that is {current} cannot be changed to {requested}.")
        self.current = current
        self.requested = requested


class BookingConflictError(RuntimeError):
    """Raised when the requested slot is already occupied."""

    def __init__(self, date: str, time: str) -> None:
        super().__init__(f"{time} on {date} is already taken. Pick another slot.")
        self.date = date
        self.time = time


class NotFoundError(LookupError):
    """Raised when a referenced store, service or appointment does not exist."""
    pass


class PlanLimitReachedError(RuntimeError):
    """Raised when a store has used up its monthly booking allowance."""
    pass


class SlotNotOfferedError(ValueError):
    """Raised when booking a time the store does not offer on that weekday."""
    pass
