"""
Tests for the Image container
"""

import numpy as np
import pytest

from extrema_roi.core.errors import PreconditionError
from extrema_roi.core.image import Image, ImageKind


class TestImage:
    """Test Image construction and attributes"""

    def test_grey(self):
        """A 2-D array is a grey image"""
        image = Image(np.zeros((4, 6), dtype=np.uint8))

        assert (image.width, image.height, image.size) == (6, 4, 24)
        assert image.channels == 1
        assert image.kind is ImageKind.GREY
        assert image.components == 1
        assert not image.alpha
        assert image.depth == 8
        assert image.max_value == 255

    @pytest.mark.parametrize(
        "channels, kind, components, alpha",
        [
            (2, ImageKind.GREYA, 1, True),
            (3, ImageKind.RGB, 3, False),
            (4, ImageKind.RGBA, 3, True),
        ],
    )
    def test_channel_layouts(self, channels, kind, components, alpha):
        """Channel count determines the layout"""
        image = Image(np.zeros((3, 3, channels), dtype=np.uint16))

        assert image.kind is kind
        assert image.components == components
        assert image.alpha is alpha
        assert image.depth == 16
        assert image.max_value == 65535

    def test_single_channel_axis_squeezed(self):
        """A trailing axis of length one is dropped"""
        image = Image(np.zeros((3, 5, 1), dtype=np.uint8))

        assert image.channels == 1
        assert image.data.shape == (3, 5)

    @pytest.mark.parametrize(
        "data",
        [
            np.zeros((3, 3), dtype=np.float64),
            np.zeros((3, 3), dtype=bool),
            np.zeros((3, 3, 5), dtype=np.uint8),
            np.zeros((2, 3, 3, 3), dtype=np.uint8),
            np.zeros((0, 3), dtype=np.uint8),
        ],
    )
    def test_rejected_arrays(self, data):
        """Unsupported dtypes and shapes raise PreconditionError"""
        with pytest.raises(PreconditionError):
            Image(data)

    def test_read_only(self):
        """Pixel data cannot be modified through the image"""
        source = np.zeros((3, 3), dtype=np.uint8)
        image = Image(source)

        with pytest.raises(ValueError):
            image.data[0, 0] = 1
        source[0, 0] = 1  # the caller's array stays writable

    def test_from_array_passthrough(self):
        """from_array does not wrap an Image twice"""
        image = Image(np.zeros((3, 3), dtype=np.uint8))

        assert Image.from_array(image) is image

    def test_value_uses_x_y(self):
        """value(x, y) reads column x of row y"""
        data = np.arange(12, dtype=np.uint8).reshape(3, 4)
        image = Image(data)

        assert image.value(3, 0) == 3
        assert image.value(0, 2) == 8

    def test_channel_view(self):
        """channel() returns a 2-D view"""
        data = np.zeros((2, 2, 3), dtype=np.uint8)
        data[:, :, 1] = 7
        image = Image(data)

        assert image.channel(1).shape == (2, 2)
        assert (image.channel(1) == 7).all()
        assert image.value(1, 1, channel=1) == 7


class TestCheckProcessable:
    """Test process requirement checks"""

    def test_accepted(self):
        """Matching requirements pass silently"""
        image = Image(np.zeros((3, 3), dtype=np.uint8))

        image.check_processable("blur", channels=[1], components=[1], bit_depth=[8, 16])

    def test_channels(self):
        """Channel mismatch names the process"""
        image = Image(np.zeros((3, 3, 3), dtype=np.uint8))

        with pytest.raises(PreconditionError, match="The process: extract can only be applied"):
            image.check_processable("extract", channels=[1])

    def test_bit_depth(self):
        """Bit depth mismatch is reported"""
        image = Image(np.zeros((3, 3), dtype=np.uint16))

        with pytest.raises(PreconditionError, match="bit depth is 8"):
            image.check_processable("threshold", bit_depth=[8])


class TestLocalExtremes:
    """Test 3x3 neighbourhood search"""

    @pytest.fixture
    def image(self):
        return Image(np.array([[1, 5, 2], [5, 3, 0], [0, 4, 0]], dtype=np.uint8))

    def test_local_max_first_in_row_major_order(self, image):
        """Ties resolve to the first position scanned"""
        assert image.local_max(1, 1) == (5, (1, 0))

    def test_local_min_first_in_row_major_order(self, image):
        """Ties resolve to the first position scanned"""
        assert image.local_min(1, 1) == (0, (2, 1))

    def test_corner_neighbourhood_clipped(self, image):
        """Only in-bounds pixels are considered"""
        assert image.local_max(0, 0) == (5, (1, 0))
        assert image.local_min(2, 2) == (0, (2, 1))
