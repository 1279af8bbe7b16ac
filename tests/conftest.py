"""
Shared fixtures and helpers for the NEC analysis tests.
"""

from typing import Iterator, Optional

import awkward as ak
import pytest

from domain.config import AnalysisConfig, CollectionNames
from domain.errors import ResourceUnavailableError
from domain.events import EventBatch
from services.analysis.nec_analyzer import NECAnalyzer
from services.histograms.registry import create_default_registry


COLLECTIONS = CollectionNames()


def make_event(
    rec_q2: Optional[float] = 25.0,
    rec_x: float = 0.1,
    gen_q2: Optional[float] = 24.0,
    gen_x: float = 0.11,
    rec_particles=((50.0, 1.0, 0.0, 1.0),),
    gen_particles=((51.0, 1.0, 0.0, 1.0),),
) -> dict:
    """
    Build one event record.

    Particles are ``(energy, px, py, pz)`` tuples; a ``None`` Q2 leaves the
    kinematics collection empty.
    """
    def kinematics(q2, x):
        return [] if q2 is None else [{"Q2": q2, "x": x}]

    def particles(records):
        return [{"energy": e, "px": px, "py": py, "pz": pz} for e, px, py, pz in records]

    return {
        COLLECTIONS.rec_kinematics: kinematics(rec_q2, rec_x),
        COLLECTIONS.gen_kinematics: kinematics(gen_q2, gen_x),
        COLLECTIONS.rec_particles: particles(rec_particles),
        COLLECTIONS.gen_particles: particles(gen_particles),
    }


def make_events(*events: dict) -> ak.Array:
    return ak.Array(list(events))


def entries(registry, name: str) -> float:
    """Total sum of weights of a histogram, including under/overflow."""
    return registry[name].sum(flow=True).value


class InMemoryEventReader:
    """Stands in for EventReader, serving events from Python records."""

    def __init__(self, files: dict[str, list[dict]], step_size: int = 2):
        self.files = files
        self.step_size = step_size

    def count_events(self, file_path: str) -> int:
        if file_path not in self.files:
            raise ResourceUnavailableError(file_path, "cannot open input (not found)")
        return len(self.files[file_path])

    def iterate(self, file_path: str, max_events: Optional[int] = None) -> Iterator[EventBatch]:
        records = self.files[file_path]
        if max_events is not None:
            records = records[:max_events]
        for start in range(0, len(records), self.step_size):
            yield EventBatch.from_records(records[start:start + self.step_size], file_path, start)


@pytest.fixture
def registry():
    return create_default_registry()


@pytest.fixture
def analyzer(registry):
    return NECAnalyzer(COLLECTIONS, min_q2=0.0, max_q2=100.0, registry=registry)


@pytest.fixture
def make_config(tmp_path):
    def _make_config(**overrides):
        values = {
            "input_files": ("a.root",),
            "output_file": str(tmp_path / "nec.root"),
            "show_progress_bar": False,
        }
        values.update(overrides)
        return AnalysisConfig(**values)
    return _make_config
