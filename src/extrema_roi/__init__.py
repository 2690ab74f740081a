"""Extrema ROI

An image-processing toolkit that labels regions of interest grown from the
local maxima or minima of grey images. Provides both CLI tools and a Python
API for programmatic use.
"""

__version__ = "0.1.0"
__author__ = "Extrema ROI Team"

# Import main API functions for convenience
from .core.analysis import analyze_image_file
from .core.errors import CapacityError, ExtremaROIError, InvariantViolation, PreconditionError
from .core.extrema import Polarity, create_roi_map_from_extrema
from .core.image import Image, ImageKind
from .core.metrics import calculate_map_metrics, calculate_region_metrics
from .core.options import ExtremaOptions, load_options, save_options
from .core.roi_map import ROIMap

__all__ = [
    "analyze_image_file",
    "create_roi_map_from_extrema",
    "Polarity",
    "ROIMap",
    "Image",
    "ImageKind",
    "ExtremaOptions",
    "load_options",
    "save_options",
    "calculate_region_metrics",
    "calculate_map_metrics",
    "ExtremaROIError",
    "PreconditionError",
    "CapacityError",
    "InvariantViolation",
]
