"""Image decode/encode and affine resizing backed by OpenCV."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, Union

import cv2
import numpy as np

from .geometry import ScalePlan

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

SUPPORTED_OUTPUT_TYPES = ("jpg", "tif", "bmp", "png")


class DecodeError(Exception):
    """Raised when an input file cannot be decoded as an image."""


class EncodeError(Exception):
    """Raised when a transformed image cannot be written."""


class TransformError(Exception):
    """Raised when the affine warp cannot be computed or applied."""


class ImageCodec(Protocol):
    def decode(self, path: PathLike, *, greyscale: bool = False) -> np.ndarray:
        ...

    def encode(self, path: PathLike, image: np.ndarray, fmt: str) -> None:
        ...


class AffineTransformer(Protocol):
    def resize(self, image: np.ndarray, plan: ScalePlan) -> np.ndarray:
        ...


class OpenCVImageCodec:
    """Read and write images with ``cv2.imread`` / ``cv2.imwrite``."""

    def decode(self, path: PathLike, *, greyscale: bool = False) -> np.ndarray:
        flags = cv2.IMREAD_GRAYSCALE if greyscale else cv2.IMREAD_COLOR
        try:
            image = cv2.imread(str(path), flags)
        except cv2.error as exc:
            raise DecodeError(f"Cannot open input image {path}: {exc}") from exc
        if image is None or image.size == 0:
            raise DecodeError(f"Cannot open input image {path}")
        return image

    def encode(self, path: PathLike, image: np.ndarray, fmt: str) -> None:
        path = Path(path)
        if path.suffix.lstrip(".").lower() != fmt.lower():
            raise EncodeError(f"Output path {path} does not match format {fmt!r}")
        try:
            written = cv2.imwrite(str(path), image)
        except cv2.error as exc:
            raise EncodeError(str(exc).strip()) from exc
        if not written:
            raise EncodeError(f"Could not write {path}")


def _affine_matrix(rows: int, columns: int, plan: ScalePlan) -> np.ndarray:
    if rows < 2 or columns < 2:
        # A single row or column collapses the reference triangle.
        return np.float32([[plan.column_scale, 0.0, 0.0], [0.0, plan.row_scale, 0.0]])

    src_tri = np.float32([[0, 0], [columns - 1, 0], [0, rows - 1]])
    dst_tri = np.float32(
        [
            [0, 0],
            [columns * plan.column_scale - 1, 0],
            [0, rows * plan.row_scale - 1],
        ]
    )
    return cv2.getAffineTransform(src_tri, dst_tri)


class OpenCVAffineTransformer:
    """Resize by warping the image corners onto the scaled corners."""

    def __init__(self, interpolation: int = cv2.INTER_LINEAR) -> None:
        self.interpolation = interpolation

    def resize(self, image: np.ndarray, plan: ScalePlan) -> np.ndarray:
        rows, columns = image.shape[:2]
        try:
            matrix = _affine_matrix(rows, columns, plan)
            warped = cv2.warpAffine(
                image,
                matrix,
                (plan.output.columns, plan.output.rows),
                flags=self.interpolation,
            )
        except cv2.error as exc:
            raise TransformError(str(exc).strip()) from exc
        log.debug("Warped %dx%d image to %s", columns, rows, plan.output)
        return warped


__all__ = [
    "AffineTransformer",
    "DecodeError",
    "EncodeError",
    "ImageCodec",
    "OpenCVAffineTransformer",
    "OpenCVImageCodec",
    "SUPPORTED_OUTPUT_TYPES",
    "TransformError",
]
