"""Error types raised by the scheduling core."""


class SchedulingError(ValueError):
    """Base class for schedule construction and evaluation errors."""


class IncompleteScheduleError(SchedulingError):
    """Raised when a schedule with empty machine slots is evaluated."""


class CyclicScheduleError(SchedulingError):
    """Raised when the machine orders of a schedule form a cycle.

    A cyclic schedule has no finite critical path, so its cost is undefined.
    """


class MoveApplicationError(SchedulingError):
    """Raised when a move cannot be applied to a schedule."""
