"""Scale factor computation for resizing images to a requested resolution."""
from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction


class InvalidImageError(ValueError):
    """Raised when an image reports a non-positive pixel dimension."""


@dataclass(frozen=True)
class Dimensions:
    """Pixel dimensions expressed as ``(rows, columns)``."""

    rows: int
    columns: int

    @classmethod
    def from_shape(cls, shape: tuple[int, ...]) -> "Dimensions":
        """Build dimensions from a numpy ``shape`` (height first)."""
        return cls(rows=int(shape[0]), columns=int(shape[1]))

    def __str__(self) -> str:
        return f"{self.columns}x{self.rows}"


@dataclass(frozen=True)
class ScalePlan:
    """Resolved row/column scale factors and the resulting output size."""

    row_scale: float
    column_scale: float
    output: Dimensions

    @property
    def uniform(self) -> bool:
        return self.row_scale == self.column_scale


def compute_scale_plan(
    source: Dimensions,
    target: Dimensions,
    preserve_aspect: bool = False,
) -> ScalePlan:
    """Return the :class:`ScalePlan` that maps ``source`` onto ``target``.

    Each axis is scaled by ``target / source``. When ``preserve_aspect`` is set
    both axes use the smaller of the two ratios so the image is scaled as little
    as possible and never overshoots the requested bounds. Fractional pixel
    counts are truncated; an axis that would truncate to zero keeps one pixel.

    Raises
    ------
    InvalidImageError
        If ``source`` has a dimension that is zero or negative.
    ValueError
        If ``target`` has a dimension that is zero or negative.
    """

    if source.rows <= 0 or source.columns <= 0:
        raise InvalidImageError(f"Image has invalid dimensions {source}")
    if target.rows <= 0 or target.columns <= 0:
        raise ValueError(f"Target dimensions must be positive, got {target}")

    # Fractions keep floor(source * ratio) exact.
    row_ratio = Fraction(target.rows, source.rows)
    col_ratio = Fraction(target.columns, source.columns)
    if preserve_aspect:
        ratio = min(row_ratio, col_ratio)
        row_ratio = col_ratio = ratio

    output = Dimensions(
        rows=max(1, math.floor(source.rows * row_ratio)),
        columns=max(1, math.floor(source.columns * col_ratio)),
    )
    return ScalePlan(
        row_scale=float(row_ratio),
        column_scale=float(col_ratio),
        output=output,
    )


__all__ = ["Dimensions", "InvalidImageError", "ScalePlan", "compute_scale_plan"]
