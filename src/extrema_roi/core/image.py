"""Pixel grid container used as the input of the extraction core."""

from enum import Enum

import numpy as np

from .errors import PreconditionError


class ImageKind(str, Enum):
    """Channel layout of an image."""

    GREY = "GREY"
    GREYA = "GREYA"
    RGB = "RGB"
    RGBA = "RGBA"


# channels -> (kind, components, alpha)
_KINDS = {
    1: (ImageKind.GREY, 1, False),
    2: (ImageKind.GREYA, 1, True),
    3: (ImageKind.RGB, 3, False),
    4: (ImageKind.RGBA, 3, True),
}


class Image:
    """Read-only integer pixel grid.

    Wraps a numpy array of shape (height, width) or (height, width, channels).
    Samples are addressed as ``value(x, y)`` with x the column and y the row.

    Attributes:
        data: Underlying array (read-only view)
        width: Number of columns
        height: Number of rows
        size: Number of pixels (width x height)
        channels: Number of channels including alpha
        components: Number of colour components excluding alpha
        alpha: Whether the last channel is alpha
        kind: Channel layout
        depth: Bits per sample
        max_value: Largest value a sample can hold
    """

    def __init__(self, data: np.ndarray):
        array = np.asarray(data)

        if array.dtype == np.bool_ or not np.issubdtype(array.dtype, np.integer):
            raise PreconditionError(f"Pixel samples must be integers, got dtype {array.dtype}")

        if array.ndim == 3 and array.shape[2] == 1:
            array = array[:, :, 0]

        if array.ndim == 2:
            channels = 1
        elif array.ndim == 3 and array.shape[2] in _KINDS:
            channels = array.shape[2]
        else:
            raise PreconditionError(f"Unsupported image shape {array.shape}")

        height, width = array.shape[:2]
        if width < 1 or height < 1:
            raise PreconditionError(f"Image must be at least 1x1, got {width}x{height}")

        view = array.view()
        view.flags.writeable = False

        self.data = view
        self.width = int(width)
        self.height = int(height)
        self.size = self.width * self.height
        self.channels = channels
        self.kind, self.components, self.alpha = _KINDS[channels]
        self.depth = int(array.dtype.itemsize * 8)
        self.max_value = int(np.iinfo(array.dtype).max)

    @classmethod
    def from_array(cls, data) -> "Image":
        """Return ``data`` unchanged if it is already an Image, else wrap it."""
        if isinstance(data, cls):
            return data
        return cls(data)

    def __repr__(self) -> str:
        return f"Image({self.width}x{self.height}, kind={self.kind.value}, depth={self.depth})"

    def value(self, x: int, y: int, channel: int = 0) -> int:
        """Sample at column x, row y."""
        if self.channels == 1:
            return int(self.data[y, x])
        return int(self.data[y, x, channel])

    def channel(self, index: int = 0) -> np.ndarray:
        """2-D view of one channel."""
        if self.channels == 1:
            return self.data
        return self.data[:, :, index]

    def check_processable(
        self,
        process_name: str,
        channels: list[int] | None = None,
        components: list[int] | None = None,
        bit_depth: list[int] | None = None,
    ) -> None:
        """Raise PreconditionError if the image does not fit the process requirements.

        Args:
            process_name: Name used in the error message
            channels: Accepted channel counts
            components: Accepted colour component counts
            bit_depth: Accepted bits per sample

        Raises:
            PreconditionError: If any requirement is not met
        """
        if channels is not None and self.channels not in channels:
            raise PreconditionError(
                f"The process: {process_name} can only be applied if the number of channels is "
                f"{_join(channels)} (image has {self.channels})"
            )
        if components is not None and self.components not in components:
            raise PreconditionError(
                f"The process: {process_name} can only be applied if the number of components is "
                f"{_join(components)} (image has {self.components})"
            )
        if bit_depth is not None and self.depth not in bit_depth:
            raise PreconditionError(
                f"The process: {process_name} can only be applied if the bit depth is "
                f"{_join(bit_depth)} (image has {self.depth})"
            )

    def local_max(self, x: int, y: int, channel: int = 0) -> tuple[int, tuple[int, int]]:
        """Largest sample in the 3x3 neighbourhood of (x, y).

        Returns:
            Tuple of (value, (x, y)) of the first maximum in row-major order
        """
        return self._local_extreme(x, y, channel, lambda a, b: a > b)

    def local_min(self, x: int, y: int, channel: int = 0) -> tuple[int, tuple[int, int]]:
        """Smallest sample in the 3x3 neighbourhood of (x, y).

        Returns:
            Tuple of (value, (x, y)) of the first minimum in row-major order
        """
        return self._local_extreme(x, y, channel, lambda a, b: a < b)

    def _local_extreme(self, x, y, channel, better):
        best_value = None
        best_position = (x, y)
        for ny in range(max(0, y - 1), min(self.height, y + 2)):
            for nx in range(max(0, x - 1), min(self.width, x + 2)):
                current = self.value(nx, ny, channel)
                if best_value is None or better(current, best_value):
                    best_value = current
                    best_position = (nx, ny)
        return best_value, best_position


def _join(values: list[int]) -> str:
    return " or ".join(str(v) for v in values)
