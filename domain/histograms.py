"""
Histogram definition domain models.

Binning and naming of the histograms filled by the analysis.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AxisSpec:
    """Binning of one histogram axis."""

    title: str
    num: int
    start: float
    stop: float

    def __post_init__(self):
        """Validate axis binning."""
        if self.num <= 0:
            raise ValueError(f"num must be positive, got {self.num}")
        if self.start >= self.stop:
            raise ValueError(f"start ({self.start}) must be less than stop ({self.stop})")


@dataclass(frozen=True)
class HistogramSpec:
    """
    Declaration of a 1D or 2D histogram.

    Axes are referenced by key so histograms of the same quantity share
    one binning.
    """

    name: str
    x_axis: str
    y_axis: Optional[str] = None
    title: str = ""

    def __post_init__(self):
        """Validate histogram declaration."""
        if not self.name:
            raise ValueError("name cannot be empty")
        if not self.x_axis:
            raise ValueError("x_axis cannot be empty")

    @property
    def ndim(self) -> int:
        return 1 if self.y_axis is None else 2


@dataclass(frozen=True)
class FillRule:
    """
    Routes derived quantities into a histogram.

    Sources are written ``"<view>.<field>"``, e.g. ``"rec.rapidity"``.
    """

    histogram: str
    x: str
    y: Optional[str] = None
    weight: Optional[str] = None

    def __post_init__(self):
        """Validate fill rule."""
        if self.y is not None and self.weight is not None:
            raise ValueError(f"{self.histogram}: weighted 2D fills are not supported")

    @property
    def sources(self) -> tuple[str, ...]:
        return tuple(source for source in (self.x, self.y, self.weight) if source is not None)
