"""Image processing utilities applied before ROI extraction."""

from collections.abc import Sequence

import cv2
import numpy as np

_BORDER_TYPES = {
    "constant": cv2.BORDER_CONSTANT,
    "replicate": cv2.BORDER_REPLICATE,
    "reflect": cv2.BORDER_REFLECT,
    "reflect101": cv2.BORDER_REFLECT_101,
}


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert an OpenCV image to a single channel.

    Args:
        image: Grayscale, grey+alpha, BGR or BGRA image

    Returns:
        2-D grayscale image with the input dtype
    """
    if image.ndim == 2:
        return image.copy()

    channels = image.shape[2]
    if channels == 1:
        return image[:, :, 0].copy()
    if channels == 2:
        # Grey + alpha: drop alpha
        return image[:, :, 0].copy()
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)

    raise ValueError(f"Unsupported number of channels: {channels}")


def enhance_contrast(
    image: np.ndarray, clip_limit: float = 2.0, tile_grid_size: tuple[int, int] = (8, 8)
) -> np.ndarray:
    """Enhance image contrast using CLAHE.

    Args:
        image: Input grayscale image (8 or 16 bit)
        clip_limit: Threshold for contrast limiting
        tile_grid_size: Size of the grid for histogram equalization

    Returns:
        Contrast-enhanced image
    """
    clahe = cv2.createCLAHE(clipLimit=clip_limit, tileGridSize=tile_grid_size)
    return clahe.apply(image)


def apply_box_blur(
    image: np.ndarray, width: int = 3, height: int | None = None, border_type: str = "reflect101"
) -> np.ndarray:
    """Average every pixel over a width x height box (normalized separable kernel).

    Args:
        image: Input image
        width: Kernel width in pixels
        height: Kernel height in pixels (defaults to width)
        border_type: One of 'constant', 'replicate', 'reflect', 'reflect101'

    Returns:
        Blurred image with the input dtype
    """
    height = width if height is None else height
    if width < 1 or height < 1:
        raise ValueError(f"Box size must be positive, got {width}x{height}")

    return cv2.blur(image, (width, height), borderType=_border_type(border_type))


def apply_gaussian_blur(image: np.ndarray, kernel_size: int = 5, sigma: float = 0) -> np.ndarray:
    """Apply Gaussian blur to image.

    Args:
        image: Input image
        kernel_size: Size of the Gaussian kernel (must be odd)
        sigma: Standard deviation for Gaussian kernel (0 = auto-calculate)

    Returns:
        Blurred image
    """
    if kernel_size % 2 == 0:
        kernel_size += 1

    return cv2.GaussianBlur(image, (kernel_size, kernel_size), sigma)


def pad_image(
    image: np.ndarray,
    size: int | tuple[int, int] = 1,
    algorithm: str | Sequence[int] = "replicate",
) -> np.ndarray:
    """Add a border around the image.

    Args:
        image: Input image
        size: Border width, or (horizontal, vertical) border widths
        algorithm: 'replicate' to copy the edge pixels, or a fill colour
            with one value per channel

    Returns:
        Padded image

    Raises:
        ValueError: If the fill colour does not have one value per channel
    """
    size_x, size_y = (size, size) if isinstance(size, int) else size
    if size_x < 0 or size_y < 0:
        raise ValueError(f"Padding size must be non-negative, got {size}")

    if isinstance(algorithm, str):
        return cv2.copyMakeBorder(image, size_y, size_y, size_x, size_x, _border_type(algorithm))

    channels = 1 if image.ndim == 2 else image.shape[2]
    fill = list(algorithm)
    if len(fill) != channels:
        raise ValueError(
            f"Fill colour must have one value per channel ({channels}), got {len(fill)}"
        )

    # copyMakeBorder takes up to 4 values
    return cv2.copyMakeBorder(
        image, size_y, size_y, size_x, size_x, cv2.BORDER_CONSTANT, value=fill + [0] * (4 - len(fill))
    )


def crop_image(
    image: np.ndarray, crop_region: tuple[int, int, int, int]
) -> tuple[np.ndarray, tuple[int, int]]:
    """Crop image to specified region.

    Args:
        image: Input image
        crop_region: Tuple of (x, y, width, height)

    Returns:
        Tuple of (cropped_image, (x_offset, y_offset))

    Raises:
        ValueError: If the clipped region is empty
    """
    x, y, w, h = crop_region

    # Clip to image bounds
    img_h, img_w = image.shape[:2]
    x = max(0, min(x, img_w - 1))
    y = max(0, min(y, img_h - 1))
    w = min(w, img_w - x)
    h = min(h, img_h - y)
    if w <= 0 or h <= 0:
        raise ValueError(f"Crop region {crop_region} is empty after clipping")

    cropped = image[y : y + h, x : x + w].copy()
    return cropped, (x, y)


def _border_type(name: str) -> int:
    try:
        return _BORDER_TYPES[name]
    except KeyError:
        raise ValueError(f"Unknown border type '{name}'. Use one of: {', '.join(_BORDER_TYPES)}") from None
