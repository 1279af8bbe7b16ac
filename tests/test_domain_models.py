"""
Unit tests for domain models.

Tests that all domain models validate correctly and are immutable.
"""

import pytest
import awkward as ak
import numpy as np

from domain import (
    EventBatch,
    SelectionStatistics,
    AxisSpec,
    HistogramSpec,
    FillRule,
    ResourceUnavailableError,
    AnalysisConfig,
    CollectionNames,
)
from domain.config import DEFAULT_INPUT_FILE
from domain.kinematics import DerivedKinematics


class TestEventBatch:
    """Tests for EventBatch domain model."""

    def test_create_valid_event_batch(self):
        """Test creating a valid EventBatch."""
        events = ak.Array([{"Coll": [{"Q2": 1.0}]}, {"Coll": []}])
        batch = EventBatch(events=events, source="file.root", entry_start=10, event_count=2)

        assert batch.event_count == 2
        assert batch.entry_stop == 12
        assert batch.collections == ["Coll"]

    def test_event_batch_count_mismatch_fails(self):
        """Test that event_count must match the number of events."""
        events = ak.Array([{"Coll": []}])
        with pytest.raises(ValueError, match="does not match"):
            EventBatch(events=events, source="file.root", entry_start=0, event_count=3)

    def test_event_batch_negative_start_fails(self):
        """Test that negative entry_start raises ValueError."""
        events = ak.Array([{"Coll": []}])
        with pytest.raises(ValueError, match="entry_start must be non-negative"):
            EventBatch(events=events, source="file.root", entry_start=-1, event_count=1)

    def test_event_batch_from_records(self):
        """Test creating EventBatch from plain records."""
        batch = EventBatch.from_records([{"Coll": [{"Q2": 2.0}]}] * 3, source="mem", entry_start=4)

        assert batch.event_count == 3
        assert batch.source == "mem"
        assert batch.entry_start == 4

    def test_event_batch_is_immutable(self):
        """Test that EventBatch is immutable."""
        batch = EventBatch.from_records([{"Coll": []}])

        with pytest.raises(Exception):  # FrozenInstanceError
            batch.source = "other"


class TestSelectionStatistics:
    """Tests for SelectionStatistics domain model."""

    def test_counters_must_add_up(self):
        """Test that rejected + selected must equal events read."""
        with pytest.raises(ValueError, match="must equal events_read"):
            SelectionStatistics(events_read=5, failed_availability=1, events_selected=1)

    def test_negative_counter_fails(self):
        """Test that negative counters raise ValueError."""
        with pytest.raises(ValueError, match="omitted_fills must be non-negative"):
            SelectionStatistics(omitted_fills=-1)

    def test_addition(self):
        """Test combining statistics from two workers."""
        a = SelectionStatistics(events_read=3, failed_availability=1, failed_q2_window=1, events_selected=1)
        b = SelectionStatistics(events_read=2, events_selected=2, omitted_fills=4)

        total = a + b

        assert total.events_read == 5
        assert total.events_selected == 3
        assert total.events_skipped == 2
        assert total.omitted_fills == 4
        assert total == b + a

    def test_selection_efficiency(self):
        """Test efficiency percentage, including the empty case."""
        stats = SelectionStatistics(events_read=4, failed_q2_window=1, events_selected=3)

        assert stats.selection_efficiency == pytest.approx(75.0)
        assert SelectionStatistics().selection_efficiency == 0.0

    def test_to_dict(self):
        """Test JSON-friendly conversion."""
        stats = SelectionStatistics(events_read=2, failed_availability=1, events_selected=1)
        result = stats.to_dict()

        assert result["events_read"] == 2
        assert result["events_skipped"] == 1
        assert result["selection_efficiency"] == "50.0%"


class TestHistogramModels:
    """Tests for AxisSpec, HistogramSpec and FillRule."""

    def test_axis_requires_bins(self):
        """Test that zero bins raises ValueError."""
        with pytest.raises(ValueError, match="num must be positive"):
            AxisSpec("E", 0, 0., 1.)

    def test_axis_requires_increasing_edges(self):
        """Test that inverted edges raise ValueError."""
        with pytest.raises(ValueError, match="must be less than stop"):
            AxisSpec("E", 10, 5., 1.)

    def test_histogram_dimension(self):
        """Test ndim from the declared axes."""
        assert HistogramSpec("h1", "ene").ndim == 1
        assert HistogramSpec("h2", "x", "x").ndim == 2

    def test_histogram_requires_name(self):
        with pytest.raises(ValueError, match="name cannot be empty"):
            HistogramSpec("", "ene")

    def test_weighted_2d_rule_fails(self):
        """Test that 2D fills cannot carry weights."""
        with pytest.raises(ValueError, match="weighted 2D"):
            FillRule("h", x="rec.q2", y="gen.q2", weight="rec.weight")

    def test_rule_sources(self):
        rule = FillRule("h", x="rec.rapidity", weight="rec.weight")
        assert rule.sources == ("rec.rapidity", "rec.weight")


class TestDerivedKinematics:
    """Tests for DerivedKinematics domain model."""

    def test_quantity_levels(self):
        assert DerivedKinematics.is_particle_quantity("rapidity") is True
        assert DerivedKinematics.is_particle_quantity("ln_q2") is False

    def test_unknown_quantity_fails(self):
        with pytest.raises(KeyError, match="Unknown derived quantity"):
            DerivedKinematics.is_particle_quantity("pt")

    def test_select(self):
        """Test event selection keeps event and particle quantities aligned."""
        event = ak.Array([1.0, 2.0, 3.0])
        particle = ak.Array([[1.0], [2.0, 2.5], []])
        derived = DerivedKinematics(event, event, event, event, particle, particle, particle, particle)

        selected = derived.select(np.array([False, True, True]))

        assert len(selected) == 2
        assert selected.q2.tolist() == [2.0, 3.0]
        assert selected.energy.tolist() == [[2.0, 2.5], []]


class TestResourceUnavailableError:

    def test_message(self):
        error = ResourceUnavailableError("in.root", "no events found")
        assert str(error) == "in.root: no events found"
        assert error.location == "in.root"


class TestAnalysisConfig:
    """Tests for AnalysisConfig domain model."""

    def test_defaults(self):
        """Test default configuration values."""
        config = AnalysisConfig()

        assert config.input_files == (DEFAULT_INPUT_FILE,)
        assert config.min_q2 == 0.0
        assert config.max_q2 == 100.0
        assert config.n_pow == 1.0
        assert config.collections.rec_particles == "ReconstructedBreitFrameParticles"
        assert config.collections.gen_particles == "GeneratedBreitFrameParticles"

    def test_invalid_q2_window_fails(self):
        """Test that min_q2 must be below max_q2."""
        with pytest.raises(ValueError, match="min_q2 .* must be less than max_q2"):
            AnalysisConfig(min_q2=100.0, max_q2=100.0)

    def test_empty_inputs_fail(self):
        with pytest.raises(ValueError, match="input_files cannot be empty"):
            AnalysisConfig(input_files=())

    def test_duplicate_inputs_fail(self):
        """Test that a file listed twice is rejected instead of read once."""
        with pytest.raises(ValueError, match="listed more than once: a.root"):
            AnalysisConfig(input_files=("a.root", "b.root", "a.root"))

    def test_duplicate_cli_inputs_fail(self):
        with pytest.raises(ValueError, match="listed more than once"):
            AnalysisConfig().with_overrides(input_files=["x.root", "x.root"])

    def test_invalid_threads_fail(self):
        with pytest.raises(ValueError, match="threads must be positive"):
            AnalysisConfig(threads=0)

    def test_negative_max_events_fail(self):
        with pytest.raises(ValueError, match="max_events must be non-negative"):
            AnalysisConfig(max_events=-1)

    def test_config_is_immutable(self):
        """Test that AnalysisConfig is immutable."""
        config = AnalysisConfig()

        with pytest.raises(Exception):  # FrozenInstanceError
            config.min_q2 = 5.0

    def test_from_dict(self):
        """Test creating config from a YAML-style dictionary."""
        config = AnalysisConfig.from_dict({
            "input": {"files": ["a.root", "b.root"], "step_size": 500, "max_events": 1000},
            "output": {"file": "out.root", "stats_file": "stats.json"},
            "collections": {"rec_particles": "ReconstructedParticles"},
            "selection": {"min_q2": 10, "max_q2": 50},
            "processing": {"threads": 4, "show_progress_bar": False},
        })

        assert config.input_files == ("a.root", "b.root")
        assert config.output_file == "out.root"
        assert config.stats_file == "stats.json"
        assert config.collections.rec_particles == "ReconstructedParticles"
        assert config.collections.gen_particles == "GeneratedBreitFrameParticles"
        assert config.min_q2 == 10.0
        assert config.max_q2 == 50.0
        assert config.step_size == 500
        assert config.max_events == 1000
        assert config.threads == 4
        assert config.show_progress_bar is False

    def test_from_dict_single_file(self):
        config = AnalysisConfig.from_dict({"input": {"file": "single.root"}})
        assert config.input_files == ("single.root",)

    def test_from_empty_dict(self):
        assert AnalysisConfig.from_dict({}) == AnalysisConfig()

    def test_with_overrides_ignores_none(self):
        """Test that unset CLI overrides keep configured values."""
        config = AnalysisConfig(min_q2=5.0)

        updated = config.with_overrides(min_q2=None, max_q2=50.0, input_files=["x.root"])

        assert updated.min_q2 == 5.0
        assert updated.max_q2 == 50.0
        assert updated.input_files == ("x.root",)

    def test_required_collections(self):
        names = CollectionNames()
        assert names.required() == (
            "InclusiveKinematicsElectron",
            "InclusiveKinematicsTruth",
            "ReconstructedBreitFrameParticles",
            "GeneratedBreitFrameParticles",
        )
