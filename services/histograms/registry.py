"""
HistogramRegistry service - Owns the histograms filled by the analysis.

Single responsibility: declare, fill and merge named histograms.
"""

import logging
from typing import Iterable, Iterator

import awkward as ak
import hist
import numpy as np

from domain.histograms import AxisSpec, HistogramSpec
from services.histograms.definitions import AXES, HISTOGRAMS


class HistogramRegistry:
    """
    Name-keyed collection of weighted histograms.

    Every histogram uses weight storage, so each bin keeps the sum of
    weights and the sum of squared weights. Unweighted fills count with
    weight 1. Non-finite values are never filled.
    """

    def __init__(self, axes: dict[str, AxisSpec], specs: Iterable[HistogramSpec] = ()):
        """
        Initialize registry.

        Args:
            axes: Axis binning keyed by axis name
            specs: Histograms to declare
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._axes = dict(axes)
        self._specs: dict[str, HistogramSpec] = {}
        self._hists: dict[str, hist.Hist] = {}

        for spec in specs:
            self.declare(spec)

    def declare(self, spec: HistogramSpec) -> hist.Hist:
        """
        Book a new histogram.

        Raises:
            ValueError: If a histogram with the same name already exists
            KeyError: If the spec references an unknown axis
        """
        if spec.name in self._hists:
            raise ValueError(f"Histogram '{spec.name}' already declared")

        axes = [self._make_axis(spec.x_axis, "x")]
        if spec.y_axis is not None:
            axes.append(self._make_axis(spec.y_axis, "y"))

        histogram = hist.Hist(*axes, storage=hist.storage.Weight(), name=spec.name)
        self._specs[spec.name] = spec
        self._hists[spec.name] = histogram
        return histogram

    def _make_axis(self, key: str, name: str) -> hist.axis.Regular:
        if key not in self._axes:
            raise KeyError(f"Unknown axis '{key}'")
        axis = self._axes[key]
        return hist.axis.Regular(axis.num, axis.start, axis.stop, name=name, label=axis.title)

    def validate(self, names: Iterable[str]) -> None:
        """
        Check that every name refers to a declared histogram.

        Raises:
            KeyError: Listing all undeclared names
        """
        missing = sorted(set(names) - set(self._hists))
        if missing:
            raise KeyError(f"Histograms not declared: {', '.join(missing)}")

    def fill(self, name: str, x, y=None, weight=None) -> int:
        """
        Fill a histogram, skipping non-finite entries.

        Args:
            name: Declared histogram name
            x: Values for the first axis (scalar, flat or jagged array)
            y: Values for the second axis of a 2D histogram
            weight: Optional per-entry weights, same structure as ``x``

        Returns:
            Number of entries omitted because a value or weight was not finite
        """
        histogram = self[name]

        columns = [self._as_flat(x)]
        if y is not None:
            columns.append(self._as_flat(y))
        if len(columns) != histogram.ndim:
            raise ValueError(f"{name}: expected {histogram.ndim} value arrays, got {len(columns)}")

        finite = np.ones(len(columns[0]), dtype=bool)
        for column in columns:
            if len(column) != len(finite):
                raise ValueError(f"{name}: value arrays have different lengths")
            finite &= np.isfinite(column)

        weights = None
        if weight is not None:
            weights = self._as_flat(weight)
            if len(weights) != len(finite):
                raise ValueError(f"{name}: weights and values have different lengths")
            finite &= np.isfinite(weights)

        omitted = int(len(finite) - np.count_nonzero(finite))
        if omitted:
            self.logger.debug(f"{name}: omitted {omitted} non-finite entries")
        if not finite.any():
            return omitted

        if weights is None:
            histogram.fill(*[column[finite] for column in columns])
        else:
            histogram.fill(*[column[finite] for column in columns], weight=weights[finite])
        return omitted

    @staticmethod
    def _as_flat(values) -> np.ndarray:
        if isinstance(values, ak.Array):
            values = ak.to_numpy(ak.flatten(values, axis=None))
        return np.asarray(values, dtype=np.float64).ravel()

    def empty_copy(self) -> 'HistogramRegistry':
        """Registry with the same declarations and no entries."""
        return HistogramRegistry(self._axes, self._specs.values())

    def merge(self, other: 'HistogramRegistry') -> None:
        """
        Add the bin contents of another registry into this one.

        Raises:
            ValueError: If the two registries declare different histograms
        """
        if set(other.names) != set(self.names):
            raise ValueError("Cannot merge registries with different histograms")
        for name, histogram in other.items():
            self._hists[name] += histogram

    @property
    def names(self) -> list[str]:
        return list(self._hists)

    def spec(self, name: str) -> HistogramSpec:
        return self._specs[name]

    def items(self) -> Iterator[tuple[str, hist.Hist]]:
        return iter(self._hists.items())

    def __getitem__(self, name: str) -> hist.Hist:
        if name not in self._hists:
            raise KeyError(f"Histogram '{name}' not declared")
        return self._hists[name]

    def __contains__(self, name: str) -> bool:
        return name in self._hists

    def __iter__(self) -> Iterator[str]:
        return iter(self._hists)

    def __len__(self) -> int:
        return len(self._hists)


def create_default_registry() -> HistogramRegistry:
    """Registry with the full set of NEC analysis histograms."""
    return HistogramRegistry(AXES, HISTOGRAMS)
