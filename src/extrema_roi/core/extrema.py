"""ROI extraction from local extrema.

Every interior pixel that no neighbour exceeds is a candidate extremum. The
flat plateau around a candidate is walked first; it is only kept when it is
entirely surrounded by strictly lower values (strictly higher for minima)
and does not touch the image border. Neighbours already examined by an
earlier walk are read again for that test but never re-marked, and an equal
neighbour that is not part of the current walk belongs to a plateau that was
already rejected. Otherwise every label given during the walk is reverted.
Kept plateaus are then grown breadth-first into their catchment regions by
absorbing non-increasing neighbours.

Plateau walks never nest and never trigger growth: growth only starts once
the whole image has been scanned. A single growth-queue restore point per
walk is therefore enough to undo a failed plateau.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from .errors import CapacityError, InvariantViolation
from .image import Image
from .queue import TraversalQueue
from .roi_map import ROIMap

logger = logging.getLogger(__name__)

# (dx, dy) in row-major order
_EDGE_OFFSETS = ((0, -1), (-1, 0), (1, 0), (0, 1))
_ALL_OFFSETS = ((-1, -1), (0, -1), (1, -1), (-1, 0), (1, 0), (-1, 1), (0, 1), (1, 1))


class Polarity(Enum):
    """Direction of the extremum search."""

    MAXIMA = "maxima"
    MINIMA = "minima"

    def exceeds(self, value: int, reference: int) -> bool:
        """Whether ``value`` is strictly beyond ``reference`` in the search direction."""
        if self is Polarity.MAXIMA:
            return value > reference
        return value < reference


@dataclass(frozen=True)
class PlateauExpansion:
    """Walk over the equal-valued pixels of one candidate plateau."""

    queue: TraversalQueue
    members: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class RegionGrowth:
    """Breadth-first growth of committed regions."""

    queue: TraversalQueue


@dataclass
class ExtractionState:
    """Working buffers of a single extraction call."""

    width: int
    height: int
    values: list[int]
    polarity: Polarity
    offsets: tuple[tuple[int, int], ...]
    only_top: bool
    labels: np.ndarray
    processed: np.ndarray
    variations: np.ndarray
    plateau_queue: TraversalQueue
    growth_queue: TraversalQueue
    positive_id: int = 0
    negative_id: int = 0

    @classmethod
    def allocate(
        cls,
        image: Image,
        polarity: Polarity,
        allow_corner: bool,
        only_top: bool,
        max_queue_size: int | None = None,
    ) -> "ExtractionState":
        capacity = max_queue_size if max_queue_size is not None else image.size
        return cls(
            width=image.width,
            height=image.height,
            values=image.channel(0).astype(np.int64).ravel().tolist(),
            polarity=polarity,
            offsets=_ALL_OFFSETS if allow_corner else _EDGE_OFFSETS,
            only_top=only_top,
            labels=np.zeros(image.size, dtype=np.int32),
            processed=np.zeros(image.size, dtype=bool),
            variations=np.zeros(image.size, dtype=np.int64),
            plateau_queue=TraversalQueue(capacity, name="plateau"),
            growth_queue=TraversalQueue(capacity, name="growth"),
        )

    def open_region(self) -> int:
        """Allocate the next region ID tentatively."""
        if self.polarity is Polarity.MAXIMA:
            self.positive_id += 1
            return self.positive_id
        self.negative_id -= 1
        return self.negative_id

    def release_region(self) -> None:
        """Give back the ID allocated by the last open_region()."""
        if self.polarity is Polarity.MAXIMA:
            self.positive_id -= 1
        else:
            self.negative_id += 1

    def record_variation(self, index: int, parent: int) -> None:
        """Store the difference between ``index`` and the pixel examining it.

        The value is only final once ``index`` is processed; a neighbour that
        invalidates a plateau is left unprocessed and measured again later.
        """
        self.variations[index] = self.values[index] - self.values[parent]

    def mark_processed(self, index: int) -> None:
        if __debug__ and self.processed[index]:
            raise InvariantViolation(f"Pixel {index} examined twice")
        self.processed[index] = True

    def on_border(self, index: int) -> bool:
        y, x = divmod(index, self.width)
        return x == 0 or y == 0 or x == self.width - 1 or y == self.height - 1

    def neighbours(self, index: int):
        """Yield in-bounds neighbour indices in offset order."""
        y, x = divmod(index, self.width)
        width, height = self.width, self.height
        for dx, dy in self.offsets:
            nx, ny = x + dx, y + dy
            if 0 <= nx < width and 0 <= ny < height:
                yield ny * width + nx

    def unprocessed_neighbours(self, index: int):
        """Yield in-bounds neighbour indices not yet processed."""
        processed = self.processed
        for neighbour in self.neighbours(index):
            if not processed[neighbour]:
                yield neighbour


def create_roi_map_from_extrema(
    image,
    allow_corner: bool = True,
    only_top: bool = False,
    invert: bool = False,
    max_queue_size: int | None = None,
) -> ROIMap:
    """Label the catchment regions around the local extrema of a single-channel image.

    Args:
        image: Image or integer numpy array with exactly one channel
        allow_corner: Include diagonal neighbours in every test and traversal
        only_top: Only label the plateau tops, skip growth into the slopes
        invert: Search for minima (negative IDs) instead of maxima
        max_queue_size: Capacity of each traversal queue (default: pixel count)

    Returns:
        ROIMap with the label grid and the region counts

    Raises:
        PreconditionError: If the image has more than one channel
        CapacityError: If a traversal queue exceeds ``max_queue_size``
    """
    image = Image.from_array(image)
    image.check_processable("create_roi_map_from_extrema", channels=[1])

    polarity = Polarity.MINIMA if invert else Polarity.MAXIMA
    state = ExtractionState.allocate(image, polarity, allow_corner, only_top, max_queue_size)

    try:
        _scan_extrema(state)
        _grow_regions(state)
    except CapacityError as error:
        raise CapacityError(
            error.queue_name, error.capacity, state.positive_id, -state.negative_id
        ) from error

    roi_map = _assemble(state)
    logger.debug(
        "Extracted %d maxima and %d minima regions from %dx%d image",
        roi_map.positive_count,
        roi_map.negative_count,
        roi_map.width,
        roi_map.height,
    )
    return roi_map


def is_candidate(state: ExtractionState, index: int) -> bool:
    """Whether no neighbour of the interior pixel ``index`` exceeds it."""
    y, x = divmod(index, state.width)
    values = state.values
    current = values[index]
    for dx, dy in state.offsets:
        if state.polarity.exceeds(values[(y + dy) * state.width + x + dx], current):
            return False
    return True


def _scan_extrema(state: ExtractionState) -> None:
    width = state.width
    for y in range(1, state.height - 1):
        for x in range(1, width - 1):
            index = y * width + x
            if state.processed[index] or not is_candidate(state, index):
                continue

            roi_id = state.open_region()
            state.labels[index] = roi_id
            state.mark_processed(index)

            if resolve_plateau(state, index):
                logger.debug("Committed region %d at (%d, %d)", roi_id, x, y)
            else:
                state.release_region()
                logger.debug("Reverted plateau seeded at (%d, %d)", x, y)


def resolve_plateau(state: ExtractionState, seed: int) -> bool:
    """Walk the plateau of ``seed``; keep its labels only if it is a true extremum.

    Returns:
        True if the plateau was committed, False if it was reverted
    """
    state.plateau_queue.reset()
    walk = PlateauExpansion(queue=state.plateau_queue, members=[seed])
    walk.queue.push(seed)
    restore_point = state.growth_queue.mark()

    valid = True
    while valid and walk.queue:
        valid = expand(state, walk.queue.pop(), walk)

    if not valid:
        for index in walk.members:
            state.labels[index] = 0
        for index in state.growth_queue.since(restore_point):
            state.labels[index] = 0
        state.growth_queue.truncate(restore_point)
    return valid


def _grow_regions(state: ExtractionState) -> None:
    growth = RegionGrowth(queue=state.growth_queue)
    while growth.queue:
        expand(state, growth.queue.pop(), growth)


def expand(state: ExtractionState, center: int, mode: PlateauExpansion | RegionGrowth) -> bool:
    """Examine the neighbours of ``center`` according to ``mode``.

    Returns:
        False if a plateau walk found a neighbour that invalidates the plateau
    """
    roi_id = int(state.labels[center])
    center_value = state.values[center]
    exceeds = state.polarity.exceeds

    match mode:
        case PlateauExpansion(queue=queue, members=members):
            for neighbour in state.neighbours(center):
                if state.processed[neighbour]:
                    # Pixels examined earlier still bound the plateau
                    value = state.values[neighbour]
                    if exceeds(value, center_value):
                        return False
                    if value == center_value and state.labels[neighbour] != roi_id:
                        return False
                    continue

                state.record_variation(neighbour, center)
                variation = state.variations[neighbour]
                if variation == 0:
                    if state.on_border(neighbour):
                        return False
                    state.mark_processed(neighbour)
                    state.labels[neighbour] = roi_id
                    members.append(neighbour)
                    queue.push(neighbour)
                elif exceeds(variation, 0):
                    return False
                else:
                    state.mark_processed(neighbour)
                    if not state.only_top:
                        state.labels[neighbour] = roi_id
                        state.growth_queue.push(neighbour)

        case RegionGrowth(queue=queue):
            for neighbour in state.unprocessed_neighbours(center):
                state.record_variation(neighbour, center)
                state.mark_processed(neighbour)
                if not exceeds(state.variations[neighbour], 0):
                    state.labels[neighbour] = roi_id
                    queue.push(neighbour)

    return True


def _assemble(state: ExtractionState) -> ROIMap:
    if __debug__:
        if state.polarity is Polarity.MAXIMA and (state.negative_id or (state.labels < 0).any()):
            raise InvariantViolation("Negative region ID produced while searching maxima")
        if state.polarity is Polarity.MINIMA and (state.positive_id or (state.labels > 0).any()):
            raise InvariantViolation("Positive region ID produced while searching minima")

    return ROIMap(
        labels=state.labels.reshape(state.height, state.width),
        positive_count=state.positive_id,
        negative_count=-state.negative_id,
        width=state.width,
        height=state.height,
    )
