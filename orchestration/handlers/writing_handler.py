"""
WritingHandler - Handles WRITING state.

Persists the run registry and, if configured, the cut-flow summary.
"""

import json
import os

from orchestration.context import PipelineContext
from orchestration.states import PipelineState
from services.histograms.writer import HistogramWriter
from .base import StateHandler


class WritingHandler(StateHandler):
    """
    Handler for WRITING state.

    Writes every histogram into the opened output file and closes it.
    """

    def handle(self, context: PipelineContext) -> tuple[PipelineContext, PipelineState]:
        self._log_state_entry(context)

        if context.output_file is None:
            raise RuntimeError("Output file is not open")

        count = HistogramWriter.write(context.output_file, context.registry)
        HistogramWriter.close(context.output_file)
        self.logger.info(f"Wrote {count} histograms, closed output file {context.config.output_file}")

        context = context.with_output_file(None).with_histograms_written(count)

        if context.config.stats_file:
            self._save_stats(context)

        next_state = self._determine_next_state(context)
        self._log_state_exit(context, next_state)
        return context, next_state

    def _save_stats(self, context: PipelineContext):
        stats_path = context.config.stats_file
        stats_dir = os.path.dirname(stats_path)
        if stats_dir:
            os.makedirs(stats_dir, exist_ok=True)

        stats = {
            "input_events": context.input_events,
            "output_file": context.config.output_file,
            "min_q2": context.config.min_q2,
            "max_q2": context.config.max_q2,
            "histograms_written": context.histograms_written,
        }
        if context.selection_stats is not None:
            stats["selection"] = context.selection_stats.to_dict()

        with open(stats_path, "w") as f:
            json.dump(stats, f, indent=2, default=str)

        self.logger.info(f"Saved cut-flow summary to: {stats_path}")
