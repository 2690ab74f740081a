"""Label map produced by the extrema ROI extraction."""

from dataclasses import dataclass
from typing import Any

import numpy as np


@dataclass(frozen=True, eq=False)
class ROIMap:
    """Labelled regions of interest over a width x height grid.

    Positive labels 1..positive_count are regions grown from maxima,
    negative labels -1..-negative_count from minima, 0 is unlabelled.
    The label array is a private read-only copy.
    """

    labels: np.ndarray
    positive_count: int
    negative_count: int
    width: int
    height: int

    def __post_init__(self):
        labels = np.array(self.labels, dtype=np.int32, copy=True)
        if labels.shape != (self.height, self.width):
            raise ValueError(
                f"Label array shape {labels.shape} does not match {self.width}x{self.height}"
            )
        if self.positive_count < 0 or self.negative_count < 0:
            raise ValueError("Region counts must be non-negative")
        labels.flags.writeable = False
        object.__setattr__(self, "labels", labels)

    @property
    def count(self) -> int:
        """Total number of regions."""
        return self.positive_count + self.negative_count

    def region_ids(self) -> list[int]:
        """All region IDs, maxima first then minima."""
        return list(range(1, self.positive_count + 1)) + [-i for i in range(1, self.negative_count + 1)]

    def mask(self, roi_id: int) -> np.ndarray:
        """Boolean mask of the pixels carrying ``roi_id``."""
        return self.labels == roi_id

    def region_sizes(self) -> dict[int, int]:
        """Pixel count of every region, keyed by region ID."""
        ids, counts = np.unique(self.labels[self.labels != 0], return_counts=True)
        return {int(roi_id): int(count) for roi_id, count in zip(ids, counts, strict=True)}

    def labelled_fraction(self) -> float:
        """Share of pixels that belong to a region."""
        if self.labels.size == 0:
            return 0.0
        return float(np.count_nonzero(self.labels)) / float(self.labels.size)

    def to_dict(self) -> dict[str, Any]:
        """Summary without the label array, suitable for JSON."""
        return {
            "width": self.width,
            "height": self.height,
            "positive_count": self.positive_count,
            "negative_count": self.negative_count,
            "region_count": self.count,
            "labelled_fraction": self.labelled_fraction(),
        }
