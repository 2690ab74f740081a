"""Extraction options and their JSON persistence."""

import json
import os
from dataclasses import asdict, dataclass, fields

from .extrema import Polarity


@dataclass(frozen=True)
class ExtremaOptions:
    """Settings of one ROI extraction.

    Attributes:
        allow_corner: Include diagonal neighbours
        only_top: Only label plateau tops
        invert: Search minima instead of maxima
        max_queue_size: Traversal queue capacity (None = pixel count)
    """

    allow_corner: bool = True
    only_top: bool = False
    invert: bool = False
    max_queue_size: int | None = None

    def __post_init__(self):
        if self.max_queue_size is not None and self.max_queue_size < 1:
            raise ValueError(f"max_queue_size must be positive, got {self.max_queue_size}")

    @property
    def polarity(self) -> Polarity:
        return Polarity.MINIMA if self.invert else Polarity.MAXIMA

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ExtremaOptions":
        """Build options from a dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown extraction option(s): {', '.join(unknown)}")
        return cls(**data)


def save_options(file_path: str, options: ExtremaOptions, source_image: str | None = None) -> str:
    """Save extraction options to a JSON file.

    Args:
        file_path: Output file path
        options: Options to save
        source_image: Image the options were first used with

    Returns:
        Absolute path to saved file
    """
    os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)

    data = {
        "options": options.to_dict(),
        "source_image": source_image,
    }

    with open(file_path, "w") as f:
        json.dump(data, f, indent=2)

    return os.path.abspath(file_path)


def load_options(file_path: str) -> tuple[ExtremaOptions, dict]:
    """Load extraction options from a JSON file.

    Args:
        file_path: Input file path

    Returns:
        Tuple of (options, metadata_dict)

    Raises:
        ValueError: If the file has no valid 'options' section
        FileNotFoundError: If file doesn't exist
    """
    with open(file_path) as f:
        data = json.load(f)

    if not isinstance(data.get("options"), dict):
        raise ValueError(f"{file_path} does not contain an 'options' object.")

    return ExtremaOptions.from_dict(data["options"]), data


def resolve_options(**kwargs) -> ExtremaOptions:
    """Pick extraction options from keyword arguments.

    An ``options_from`` file wins over the individual flags.
    """
    if kwargs.get("options_from"):
        options, _ = load_options(kwargs["options_from"])
        return options

    return ExtremaOptions(
        allow_corner=kwargs.get("allow_corner", True),
        only_top=kwargs.get("only_top", False),
        invert=kwargs.get("invert", False),
        max_queue_size=kwargs.get("max_queue_size"),
    )


def parse_crop_string(crop_str: str | None) -> tuple[int, int, int, int] | None:
    """Parse crop string into coordinates.

    Args:
        crop_str: String in format 'x,y,w,h' or None

    Returns:
        Tuple (x, y, w, h) or None if input is None/empty

    Raises:
        ValueError: If the string does not hold four integers
    """
    if not crop_str:
        return None
    parts = crop_str.split(",")
    if len(parts) != 4:
        raise ValueError(f"Crop must be 'x,y,width,height', got '{crop_str}'")
    x, y, w, h = map(int, parts)
    return (x, y, w, h)
