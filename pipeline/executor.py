"""
PipelineExecutor - High-level pipeline orchestrator.

Wires together all services and executes the state machine:
  OPENING_INPUT → OPENING_OUTPUT → PROCESSING → WRITING → COMPLETED
"""

import logging
from typing import Optional

from domain.config import AnalysisConfig
from orchestration import PipelineState, PipelineContext, StateMachine
from orchestration.handlers import (
    OpenInputHandler,
    OpenOutputHandler,
    ProcessingHandler,
    WritingHandler,
)
from services.analysis.nec_analyzer import NECAnalyzer
from services.analysis.threaded_processor import ThreadedEventProcessor
from services.histograms.registry import HistogramRegistry, create_default_registry
from services.histograms.writer import HistogramWriter
from services.parsing.event_reader import EventReader


class PipelineExecutor:
    """
    High-level pipeline executor.

    Responsible for:
    1. Creating all services with dependency injection
    2. Building the state machine with handlers
    3. Running the pipeline
    4. Removing the output of a failed run
    """

    def __init__(
        self,
        config: AnalysisConfig,
        event_reader: Optional[EventReader] = None,
        registry: Optional[HistogramRegistry] = None
    ):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self.event_reader = event_reader or EventReader(
            collections=config.collections,
            tree_name=config.tree_name,
            step_size=config.step_size
        )
        self.registry = registry if registry is not None else create_default_registry()
        self.validate()
        self.state_machine = self._build_state_machine()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> PipelineContext:
        """Execute the pipeline and return final context."""
        self.logger.info("Initializing pipeline execution")
        initial_context = self._create_initial_context()
        final_context = self.state_machine.run(initial_context)

        if final_context.has_error and final_context.output_file is not None:
            self.logger.warning(f"Removing incomplete output {self.config.output_file}")
            HistogramWriter.discard(final_context.output_file, self.config.output_file)
            final_context = final_context.with_output_file(None)

        return final_context

    def validate(self) -> None:
        """
        Check configuration and histogram declarations without reading events.

        Raises:
            KeyError: If the fill plan references undeclared histograms or quantities
            ValueError: If a fill rule does not match its histogram
        """
        NECAnalyzer.from_config(self.config, self.registry.empty_copy())
        self.logger.debug(
            f"Configuration valid: {len(self.config.input_files)} input files, "
            f"{len(self.registry)} histograms, output {self.config.output_file}"
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _build_state_machine(self) -> StateMachine:
        """Build state machine with all handlers."""
        processor = ThreadedEventProcessor(
            event_reader=self.event_reader,
            analyzer_factory=lambda registry: NECAnalyzer.from_config(self.config, registry),
            max_threads=self.config.threads,
            show_progress=self.config.show_progress_bar
        )

        handlers = {
            PipelineState.OPENING_INPUT: OpenInputHandler(self.event_reader),
            PipelineState.OPENING_OUTPUT: OpenOutputHandler(),
            PipelineState.PROCESSING: ProcessingHandler(processor),
            PipelineState.WRITING: WritingHandler(),
        }
        return StateMachine(handlers)

    def _create_initial_context(self) -> PipelineContext:
        # every run fills its own empty registry
        return PipelineContext(
            config=self.config,
            current_state=PipelineState.IDLE,
            registry=self.registry.empty_copy(),
        )

