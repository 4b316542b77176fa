"""Exceptions raised by the forecasting core."""


class InvalidInputError(ValueError):
    """Raised when an allocator, trial or simulation precondition is violated."""
