"""
HistogramWriter service - Persists a histogram registry to a ROOT file.

Uses uproot; histograms are stored as TH1D/TH2D with sum of squared weights.
Titles follow the ROOT ``title;x-axis;y-axis`` convention of the declarations.
"""

import logging
import os

import hist
import numpy as np
import uproot
from uproot.writing.identify import to_TAxis, to_TH1x, to_TH2x

from domain.errors import ResourceUnavailableError
from domain.histograms import HistogramSpec
from .registry import HistogramRegistry


def split_title(title: str) -> tuple[str, str, str]:
    """Split ``title;x;y`` into its three parts, missing parts empty."""
    parts = title.split(";", 2)
    parts += [""] * (3 - len(parts))
    return parts[0], parts[1], parts[2]


def _to_taxis(name: str, title: str, axis):
    return to_TAxis(
        fName=name,
        fTitle=title,
        fNbins=len(axis),
        fXmin=float(axis.edges[0]),
        fXmax=float(axis.edges[-1]),
    )


def _effective_entries(sumw: np.ndarray, sumw2: np.ndarray) -> float:
    total_w2 = float(sumw2.sum())
    if total_w2 <= 0:
        return 0.0
    return float(sumw.sum()) ** 2 / total_w2


def to_root_histogram(histogram: hist.Hist, spec: HistogramSpec):
    """
    Convert a weighted histogram into a writable TH1D or TH2D.

    Flow bins are kept. The ROOT statistics (sum of w, w*x, w*x^2, ...) are
    computed from bin centers of the in-range bins.
    """
    title, x_title, y_title = split_title(spec.title)
    values = histogram.values(flow=True)
    variances = histogram.variances(flow=True)
    x_axis = histogram.axes[0]

    if histogram.ndim == 1:
        sumw = values[1:-1]
        x = x_axis.centers
        return to_TH1x(
            fName=spec.name,
            fTitle=title,
            data=np.ascontiguousarray(values, dtype=np.float64),
            fEntries=_effective_entries(values, variances),
            fTsumw=float(sumw.sum()),
            fTsumw2=float(variances[1:-1].sum()),
            fTsumwx=float((sumw * x).sum()),
            fTsumwx2=float((sumw * x ** 2).sum()),
            fSumw2=np.ascontiguousarray(variances, dtype=np.float64),
            fXaxis=_to_taxis("xaxis", x_title, x_axis),
            fYaxis=to_TAxis(fName="yaxis", fTitle=y_title, fNbins=1, fXmin=0.0, fXmax=1.0),
        )

    y_axis = histogram.axes[1]
    sumw = values[1:-1, 1:-1]
    x = x_axis.centers[:, np.newaxis]
    y = y_axis.centers[np.newaxis, :]
    # ROOT global bin = ix + (nx + 2) * iy, so x runs fastest
    return to_TH2x(
        fName=spec.name,
        fTitle=title,
        data=np.ravel(values, order="F").astype(np.float64),
        fEntries=_effective_entries(values, variances),
        fTsumw=float(sumw.sum()),
        fTsumw2=float(variances[1:-1, 1:-1].sum()),
        fTsumwx=float((sumw * x).sum()),
        fTsumwx2=float((sumw * x ** 2).sum()),
        fTsumwy=float((sumw * y).sum()),
        fTsumwy2=float((sumw * y ** 2).sum()),
        fTsumwxy=float((sumw * x * y).sum()),
        fSumw2=np.ravel(variances, order="F").astype(np.float64),
        fXaxis=_to_taxis("xaxis", x_title, x_axis),
        fYaxis=_to_taxis("yaxis", y_title, y_axis),
    )


class HistogramWriter:
    """
    Service for creating the output file and writing histograms into it.

    All methods are static.
    """

    @staticmethod
    def open(output_path: str):
        """
        Create (or overwrite) the output ROOT file.

        Args:
            output_path: Path of the output file

        Returns:
            Writable uproot file

        Raises:
            ResourceUnavailableError: If the file cannot be created
        """
        output_dir = os.path.dirname(output_path)
        try:
            if output_dir:
                os.makedirs(output_dir, exist_ok=True)
            return uproot.recreate(output_path)
        except OSError as e:
            raise ResourceUnavailableError(output_path, f"cannot create output file ({e})") from e

    @staticmethod
    def write(output_file, registry: HistogramRegistry) -> int:
        """
        Write every histogram of the registry under its declared name.

        Args:
            output_file: Writable uproot file returned by ``open``
            registry: Histograms to write

        Returns:
            Number of histograms written
        """
        count = 0
        for name, histogram in registry.items():
            output_file[name] = to_root_histogram(histogram, registry.spec(name))
            count += 1
        logging.debug(f"Wrote {count} histograms")
        return count

    @staticmethod
    def close(output_file) -> None:
        output_file.close()

    @staticmethod
    def discard(output_file, output_path: str) -> None:
        """Close and delete a partially written output file."""
        output_file.close()
        if os.path.exists(output_path):
            os.remove(output_path)
