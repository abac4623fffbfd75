# ABOUTME: Declares the error types raised by the booking priority engine.
# ABOUTME: All errors are ValueError subclasses so callers can recover per student.


class PriorityError(ValueError):
    """Base class for booking priority errors."""


class InvalidSnapshot(PriorityError):
    """A student snapshot or participant record holds an unusable value."""


class EmptyInput(PriorityError):
    """Ranking or averaging was requested over an empty student set."""


class InvalidConfig(PriorityError):
    """Wait thresholds or score weights are malformed."""
