"""
NECAnalyzer service - Event selection, derivation and accumulation.

For each batch: drop events missing a required collection, derive the
kinematics of both views, drop events outside the Q2 window and fill the
histogram registry according to the fill plan.
"""

import logging
from typing import Iterable

import awkward as ak
import numpy as np

from domain.config import AnalysisConfig, CollectionNames
from domain.events import EventBatch
from domain.histograms import FillRule
from domain.kinematics import DerivedKinematics
from domain.statistics import SelectionStatistics
from services.calculations import consts, kinematics
from services.histograms.definitions import FILL_PLAN
from services.histograms.registry import HistogramRegistry


class NECAnalyzer:
    """
    Applies the event selection and fills a histogram registry.

    The registry is owned by the caller; the analyzer only adds entries.
    Every histogram and quantity named in the fill plan is checked at
    construction, so a typo fails before any event is read.
    """

    def __init__(
        self,
        collections: CollectionNames,
        min_q2: float,
        max_q2: float,
        registry: HistogramRegistry,
        fill_plan: Iterable[FillRule] = FILL_PLAN
    ):
        self.collections = collections
        self.min_q2 = min_q2
        self.max_q2 = max_q2
        self.registry = registry
        self.fill_plan = tuple(fill_plan)
        self.logger = logging.getLogger(self.__class__.__name__)

        self._validate_fill_plan()

    @classmethod
    def from_config(cls, config: AnalysisConfig, registry: HistogramRegistry) -> 'NECAnalyzer':
        return cls(
            collections=config.collections,
            min_q2=config.min_q2,
            max_q2=config.max_q2,
            registry=registry,
        )

    def _validate_fill_plan(self):
        """Validate histogram names and quantity sources of the fill plan."""
        self.registry.validate(rule.histogram for rule in self.fill_plan)

        for rule in self.fill_plan:
            levels = {self._is_particle_source(source) for source in rule.sources}
            if len(levels) > 1:
                raise ValueError(
                    f"{rule.histogram}: cannot mix event and particle quantities in one fill"
                )
            expected_ndim = 1 if rule.y is None else 2
            if self.registry.spec(rule.histogram).ndim != expected_ndim:
                raise ValueError(
                    f"{rule.histogram}: fill rule is {expected_ndim}D but histogram is not"
                )

    @staticmethod
    def _split_source(source: str) -> tuple[str, str]:
        view, _, quantity = source.partition(".")
        if view not in consts.VIEWS or not quantity:
            raise KeyError(f"Invalid quantity source '{source}'")
        return view, quantity

    def _is_particle_source(self, source: str) -> bool:
        _, quantity = self._split_source(source)
        return DerivedKinematics.is_particle_quantity(quantity)

    def process_batch(self, batch: EventBatch) -> SelectionStatistics:
        """Process an EventBatch; see ``process``."""
        stats = self.process(batch.events)
        self.logger.debug(
            f"{batch.source} [{batch.entry_start}, {batch.entry_stop}): "
            f"{stats.events_selected}/{stats.events_read} events selected"
        )
        return stats

    def process(self, events: ak.Array) -> SelectionStatistics:
        """
        Run availability gate, derivation, Q2 gate and accumulation.

        Args:
            events: Record array with one field per collection

        Returns:
            Cut-flow statistics of the processed events
        """
        n_read = len(events)

        available = kinematics.has_all_collections(events, self.collections.required())
        n_available = int(np.count_nonzero(available))
        if n_available == 0:
            return SelectionStatistics(events_read=n_read, failed_availability=n_read)
        events = events[available]

        derived = self.derive(events)

        selected = kinematics.in_q2_window(derived["rec"].q2, self.min_q2, self.max_q2)
        n_selected = int(np.count_nonzero(selected))

        omitted = 0
        if n_selected > 0:
            derived = {view: view_kinematics.select(selected) for view, view_kinematics in derived.items()}
            omitted = self.accumulate(derived)

        return SelectionStatistics(
            events_read=n_read,
            failed_availability=n_read - n_available,
            failed_q2_window=n_available - n_selected,
            events_selected=n_selected,
            omitted_fills=omitted,
        )

    def derive(self, events: ak.Array) -> dict[str, DerivedKinematics]:
        """Derived kinematics of both views for events that passed the availability gate."""
        c = self.collections
        return {
            "rec": kinematics.derive_view(events[c.rec_kinematics], events[c.rec_particles]),
            "gen": kinematics.derive_view(events[c.gen_kinematics], events[c.gen_particles]),
        }

    def accumulate(self, derived: dict[str, DerivedKinematics]) -> int:
        """
        Fill every histogram of the fill plan.

        Returns:
            Number of entries omitted because of non-finite values
        """
        omitted = 0
        for rule in self.fill_plan:
            omitted += self.registry.fill(
                rule.histogram,
                self._resolve(derived, rule.x),
                y=self._resolve(derived, rule.y) if rule.y else None,
                weight=self._resolve(derived, rule.weight) if rule.weight else None,
            )
        return omitted

    def _resolve(self, derived: dict[str, DerivedKinematics], source: str) -> ak.Array:
        view, quantity = self._split_source(source)
        return getattr(derived[view], quantity)
