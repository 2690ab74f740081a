"""Fixed-capacity ring buffer of pixel indices used by the extraction passes."""

from collections.abc import Iterator

import numpy as np

from .errors import CapacityError


class TraversalQueue:
    """FIFO queue of flat pixel indices backed by a preallocated ring buffer.

    ``head`` and ``tail`` grow monotonically; the physical slot is the
    logical position modulo the capacity. Pushing more than ``capacity``
    pending entries raises CapacityError instead of overwriting.
    """

    def __init__(self, capacity: int, name: str = "traversal"):
        if capacity < 1:
            raise ValueError(f"Queue capacity must be positive, got {capacity}")
        self.name = name
        self.capacity = int(capacity)
        self._slots = np.zeros(self.capacity, dtype=np.int64)
        self.head = 0
        self.tail = 0

    def __len__(self) -> int:
        return self.tail - self.head

    def __bool__(self) -> bool:
        return self.tail > self.head

    def push(self, index: int) -> None:
        if self.tail - self.head >= self.capacity:
            raise CapacityError(self.name, self.capacity)
        self._slots[self.tail % self.capacity] = index
        self.tail += 1

    def pop(self) -> int:
        if self.tail == self.head:
            raise IndexError(f"pop from empty {self.name} queue")
        index = int(self._slots[self.head % self.capacity])
        self.head += 1
        return index

    def mark(self) -> int:
        """Current tail position, to be passed to truncate() later."""
        return self.tail

    def truncate(self, mark: int) -> None:
        """Discard every entry pushed after ``mark``."""
        if not self.head <= mark <= self.tail:
            raise ValueError(f"Cannot truncate {self.name} queue to {mark} (head={self.head}, tail={self.tail})")
        self.tail = mark

    def since(self, mark: int) -> Iterator[int]:
        """Entries pushed after ``mark`` that are still pending."""
        for position in range(max(mark, self.head), self.tail):
            yield int(self._slots[position % self.capacity])

    def reset(self) -> None:
        self.head = 0
        self.tail = 0
