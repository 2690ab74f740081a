"""Command line interface modules."""

from .extract import main as extract_main
from .summarize import main as summarize_main

__all__ = [
    "extract_main",
    "summarize_main",
]
