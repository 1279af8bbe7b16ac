"""
Configuration domain models.

Validated configuration objects for the NEC analysis.
"""

from dataclasses import dataclass, field, replace
from typing import Optional


DEFAULT_INPUT_FILE = (
    "root://dtn-eic.jlab.org//volatile/eic/EPIC/RECO/25.06.1/epic_craterlake/DIS/NC/10x100/minQ2=10/"
    "pythia8NCDIS_10x100_minQ2=10_beamEffects_xAngle=-0.025_hiDiv_5.1287.eicrecon.edm4eic.root"
)


@dataclass(frozen=True)
class CollectionNames:
    """Names of the event collections read for each view."""

    rec_kinematics: str = "InclusiveKinematicsElectron"
    gen_kinematics: str = "InclusiveKinematicsTruth"
    rec_particles: str = "ReconstructedBreitFrameParticles"
    gen_particles: str = "GeneratedBreitFrameParticles"

    def __post_init__(self):
        """Validate collection names."""
        for name in (self.rec_kinematics, self.gen_kinematics, self.rec_particles, self.gen_particles):
            if not name:
                raise ValueError("collection names cannot be empty")

    def required(self) -> tuple[str, ...]:
        """Collections that must be non-empty for an event to be analyzed."""
        return (self.rec_kinematics, self.gen_kinematics, self.rec_particles, self.gen_particles)

    def kinematics(self) -> tuple[str, ...]:
        return (self.rec_kinematics, self.gen_kinematics)

    def particles(self) -> tuple[str, ...]:
        return (self.rec_particles, self.gen_particles)


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Complete analysis configuration.

    Immutable configuration object validated at creation. Built once by the
    caller and passed into the pipeline; nothing reads a global default.
    """

    # Paths
    input_files: tuple[str, ...] = (DEFAULT_INPUT_FILE,)
    output_file: str = "nec_histograms.root"
    stats_file: Optional[str] = None
    tree_name: str = "events"

    # Collections
    collections: CollectionNames = field(default_factory=CollectionNames)

    # Selection
    min_q2: float = 0.0
    max_q2: float = 100.0
    n_pow: float = 1.0  # reserved for weight shaping, unused

    # Performance
    step_size: int = 10_000
    max_events: Optional[int] = None
    threads: int = 1
    show_progress_bar: bool = True

    def __post_init__(self):
        """Validate analysis configuration."""
        if len(self.input_files) == 0:
            raise ValueError("input_files cannot be empty")
        if any(not path for path in self.input_files):
            raise ValueError("input file paths cannot be empty")
        duplicates = sorted({path for path in self.input_files if self.input_files.count(path) > 1})
        if duplicates:
            raise ValueError(f"input files listed more than once: {', '.join(duplicates)}")
        if not self.output_file:
            raise ValueError("output_file cannot be empty")
        if not self.tree_name:
            raise ValueError("tree_name cannot be empty")
        if self.min_q2 >= self.max_q2:
            raise ValueError(f"min_q2 ({self.min_q2}) must be less than max_q2 ({self.max_q2})")
        if self.step_size <= 0:
            raise ValueError(f"step_size must be positive, got {self.step_size}")
        if self.max_events is not None and self.max_events < 0:
            raise ValueError(f"max_events must be non-negative, got {self.max_events}")
        if self.threads <= 0:
            raise ValueError(f"threads must be positive, got {self.threads}")

    def with_overrides(self, **overrides) -> 'AnalysisConfig':
        """
        Return a copy with the given fields replaced.

        ``None`` values are ignored so CLI options that were not passed
        leave the YAML values untouched.
        """
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "input_files" in changes:
            changes["input_files"] = tuple(changes["input_files"])
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'AnalysisConfig':
        """
        Create AnalysisConfig from a dictionary (e.g., loaded from YAML).

        Args:
            config_dict: Dictionary with configuration values

        Returns:
            Validated AnalysisConfig instance
        """
        input_dict = config_dict.get("input", {}) or {}
        output_dict = config_dict.get("output", {}) or {}
        collections_dict = config_dict.get("collections", {}) or {}
        selection_dict = config_dict.get("selection", {}) or {}
        processing_dict = config_dict.get("processing", {}) or {}

        # Accept either a list of files or a single file
        if "files" in input_dict:
            input_files = tuple(input_dict["files"])
        elif "file" in input_dict:
            input_files = (input_dict["file"],)
        else:
            input_files = (DEFAULT_INPUT_FILE,)

        defaults = CollectionNames()
        collections = CollectionNames(
            rec_kinematics=collections_dict.get("rec_kinematics", defaults.rec_kinematics),
            gen_kinematics=collections_dict.get("gen_kinematics", defaults.gen_kinematics),
            rec_particles=collections_dict.get("rec_particles", defaults.rec_particles),
            gen_particles=collections_dict.get("gen_particles", defaults.gen_particles),
        )

        return cls(
            input_files=input_files,
            output_file=output_dict.get("file", "nec_histograms.root"),
            stats_file=output_dict.get("stats_file"),
            tree_name=input_dict.get("tree_name", "events"),
            collections=collections,
            min_q2=float(selection_dict.get("min_q2", 0.0)),
            max_q2=float(selection_dict.get("max_q2", 100.0)),
            n_pow=float(selection_dict.get("n_pow", 1.0)),
            step_size=int(input_dict.get("step_size", 10_000)),
            max_events=input_dict.get("max_events"),
            threads=int(processing_dict.get("threads", 1)),
            show_progress_bar=processing_dict.get("show_progress_bar", True),
        )
