"""Core modules for extrema ROI extraction."""

from .analysis import analyze_image_file, prepare_image
from .errors import CapacityError, ExtremaROIError, InvariantViolation, PreconditionError
from .extrema import (
    ExtractionState,
    PlateauExpansion,
    Polarity,
    RegionGrowth,
    create_roi_map_from_extrema,
    expand,
    is_candidate,
    resolve_plateau,
)
from .image import Image, ImageKind
from .metrics import calculate_map_metrics, calculate_region_metrics
from .options import ExtremaOptions, load_options, parse_crop_string, resolve_options, save_options
from .queue import TraversalQueue
from .roi_map import ROIMap
from .visualization import create_roi_overlay, save_debug_images

__all__ = [
    # Pipeline
    "analyze_image_file",
    "prepare_image",
    # Extraction
    "create_roi_map_from_extrema",
    "ExtractionState",
    "PlateauExpansion",
    "RegionGrowth",
    "Polarity",
    "expand",
    "is_candidate",
    "resolve_plateau",
    "TraversalQueue",
    "ROIMap",
    "Image",
    "ImageKind",
    # Errors
    "ExtremaROIError",
    "PreconditionError",
    "CapacityError",
    "InvariantViolation",
    # Options
    "ExtremaOptions",
    "load_options",
    "save_options",
    "resolve_options",
    "parse_crop_string",
    # Metrics
    "calculate_region_metrics",
    "calculate_map_metrics",
    # Visualization
    "create_roi_overlay",
    "save_debug_images",
]
