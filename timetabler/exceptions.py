"""Errors raised at the boundary of the scheduler."""


class TimetableError(Exception):
    """Base class for all timetable errors."""

    pass


class InputValidationError(TimetableError):
    """Raised when input data cannot be read or fails validation."""

    pass


class CapacityExceededError(TimetableError):
    """Raised when the required occurrences cannot fit in the non-lunch slots."""

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(
            f"Total required hours ({required}) exceed available slots ({available})"
        )
