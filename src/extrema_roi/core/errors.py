"""Exceptions raised by the ROI extraction core."""


class ExtremaROIError(Exception):
    """Base class for extraction errors."""

    pass


class PreconditionError(ExtremaROIError, ValueError):
    """Input grid cannot be processed (wrong channel count, dtype or shape)."""

    pass


class CapacityError(ExtremaROIError, RuntimeError):
    """A traversal queue would exceed its capacity.

    Attributes:
        queue_name: Name of the queue that overflowed
        capacity: Capacity of that queue
        positive_count: Maxima IDs committed or tentative at failure time
        negative_count: Minima IDs committed or tentative at failure time
    """

    def __init__(
        self,
        queue_name: str,
        capacity: int,
        positive_count: int = 0,
        negative_count: int = 0,
    ):
        self.queue_name = queue_name
        self.capacity = capacity
        self.positive_count = positive_count
        self.negative_count = negative_count
        super().__init__(
            f"{queue_name} queue exceeded its capacity of {capacity} pixels "
            f"(maxima: {positive_count}, minima: {negative_count})"
        )


class InvariantViolation(ExtremaROIError, AssertionError):
    """Internal consistency check failed. Indicates a bug in the extraction."""

    pass
