"""Normalize image directory trees into a resized corpus with a metadata report."""

from .geometry import Dimensions, ScalePlan, compute_scale_plan
from .processor import BatchSummary, FatalProcessingError, process_images
from .walker import FileEntry, walk_directory

__all__ = [
    "BatchSummary",
    "Dimensions",
    "FatalProcessingError",
    "FileEntry",
    "ScalePlan",
    "compute_scale_plan",
    "process_images",
    "walk_directory",
]
