"""
Binning, histogram declarations and fill plan of the NEC analysis.

Histogram names carry a ``Rec``/``Gen`` suffix for the view they are
filled from; ``RecVsGen`` histograms correlate the two views event by event.
"""

from domain.histograms import AxisSpec, HistogramSpec, FillRule


AXES = {
    "ene": AxisSpec("E [GeV]", 200, 0., 200.),
    "theta": AxisSpec("#theta [rad]", 180, 0., 3.2),
    "rap": AxisSpec("y = ln tan(#theta/2)", 200, -15., 5.),
    "weight": AxisSpec("E/E_{p}", 30, -1., 2.),
    "q2": AxisSpec("Q^{2} [GeV^{2}]", 200, 0., 200.),
    "lnq2": AxisSpec("ln Q^{2}", 100, -5., 15.),
    "x": AxisSpec("x_{B}", 60, -1., 2.),
    "lnx": AxisSpec("ln x_{B}", 100, -50., 50.),
}

VIEW_SUFFIXES = {"rec": "Rec", "gen": "Gen"}
VIEW_TITLES = {"rec": "Reconstructed", "gen": "Generated"}

NEC_TITLE = "#LTNEC#GT"


def make_title(x: str, y: str = "", title: str = "") -> str:
    """ROOT-style ``title;x-axis;y-axis`` string."""
    return f"{title};{x};{y}"


def _view_histograms(view: str) -> list[tuple[HistogramSpec, FillRule]]:
    suffix = VIEW_SUFFIXES[view]

    def hist_1d(name, axis, source, weight=None, ytitle=""):
        spec = HistogramSpec(
            name=f"{name}{suffix}",
            x_axis=axis,
            title=make_title(AXES[axis].title, ytitle, VIEW_TITLES[view]),
        )
        rule = FillRule(
            histogram=spec.name,
            x=f"{view}.{source}",
            weight=f"{view}.{weight}" if weight else None,
        )
        return spec, rule

    return [
        # once per event
        hist_1d("hQ2", "q2", "q2"),
        hist_1d("hLogQ2", "lnq2", "ln_q2"),
        hist_1d("hXB", "x", "x"),
        hist_1d("hLogXB", "lnx", "ln_x"),
        # once per particle
        hist_1d("hEnePar", "ene", "energy"),
        hist_1d("hThetaPar", "theta", "polar_angle"),
        hist_1d("hRapPar", "rap", "rapidity"),
        hist_1d("hEneFrac", "weight", "weight"),
        hist_1d("hNECVsRap", "rap", "rapidity", weight="weight", ytitle=NEC_TITLE),
        hist_1d("hNECVsTheta", "theta", "polar_angle", weight="weight", ytitle=NEC_TITLE),
    ]


def _correlation_histograms() -> list[tuple[HistogramSpec, FillRule]]:
    entries = []
    for name, axis, source in (
        ("hQ2RecVsGen", "q2", "q2"),
        ("hLogQ2RecVsGen", "lnq2", "ln_q2"),
        ("hXBRecVsGen", "x", "x"),
        ("hLogXBRecVsGen", "lnx", "ln_x"),
    ):
        title = make_title(
            f"{AXES[axis].title} (rec.)", f"{AXES[axis].title} (gen.)", "Reconstructed vs. generated"
        )
        spec = HistogramSpec(name=name, x_axis=axis, y_axis=axis, title=title)
        rule = FillRule(histogram=name, x=f"rec.{source}", y=f"gen.{source}")
        entries.append((spec, rule))
    return entries


_DEFINITIONS = _view_histograms("rec") + _view_histograms("gen") + _correlation_histograms()

HISTOGRAMS = tuple(spec for spec, _ in _DEFINITIONS)
FILL_PLAN = tuple(rule for _, rule in _DEFINITIONS)
