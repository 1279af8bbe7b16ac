"""
ThreadedEventProcessor - Orchestrates concurrent file processing.

Single responsibility: Manage thread pool for analyzing multiple files concurrently.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import nullcontext
from typing import Callable

from tqdm import tqdm

from domain.statistics import SelectionStatistics
from services.histograms.registry import HistogramRegistry
from services.parsing.event_reader import EventReader
from .nec_analyzer import NECAnalyzer


class ThreadedEventProcessor:
    """
    Service for analyzing multiple files concurrently using a thread pool.

    Each file is analyzed into a private, empty copy of the run registry.
    The copies are merged into the run registry as files complete; bin
    sums commute, so completion order does not affect the result.
    """

    def __init__(
        self,
        event_reader: EventReader,
        analyzer_factory: Callable[[HistogramRegistry], NECAnalyzer],
        max_threads: int = 1,
        show_progress: bool = True
    ):
        """
        Initialize threaded processor.

        Args:
            event_reader: EventReader instance to use
            analyzer_factory: Builds an analyzer filling the given registry
            max_threads: Maximum number of concurrent threads
            show_progress: Whether to show progress bar
        """
        if max_threads <= 0:
            raise ValueError(f"max_threads must be positive, got {max_threads}")

        self.event_reader = event_reader
        self.analyzer_factory = analyzer_factory
        self.max_threads = max_threads
        self.show_progress = show_progress
        self.logger = logging.getLogger(self.__class__.__name__)

    def process_files(
        self,
        file_events: dict[str, int],
        registry: HistogramRegistry
    ) -> SelectionStatistics:
        """
        Analyze files concurrently and merge their histograms into ``registry``.

        Args:
            file_events: Number of events to read from each file
            registry: Run registry receiving the merged histograms

        Returns:
            Combined cut-flow statistics

        Raises:
            Exception: The first error raised while reading or analyzing a file
        """
        total_stats = SelectionStatistics()
        jobs = {path: n_events for path, n_events in file_events.items() if n_events > 0}

        with ThreadPoolExecutor(max_workers=self.max_threads) as executor:
            futures = {
                executor.submit(self._process_single_file, path, n_events, registry.empty_copy()): path
                for path, n_events in jobs.items()
            }

            with self._create_progress_bar(len(futures)) as pbar:
                for future in as_completed(futures):
                    file_path = futures[future]
                    file_registry, file_stats, processing_time = future.result()

                    registry.merge(file_registry)
                    total_stats = total_stats + file_stats

                    self.logger.debug(
                        f"{file_path}: {file_stats.events_selected}/{file_stats.events_read} "
                        f"events selected in {processing_time:.1f}s"
                    )
                    if self.show_progress:
                        pbar.update(1)

        return total_stats

    def _process_single_file(
        self,
        file_path: str,
        n_events: int,
        registry: HistogramRegistry
    ) -> tuple[HistogramRegistry, SelectionStatistics, float]:
        """Analyze one file into its own registry (runs in thread)."""
        start_time = time.time()
        analyzer = self.analyzer_factory(registry)

        stats = SelectionStatistics()
        for batch in self.event_reader.iterate(file_path, max_events=n_events):
            stats = stats + analyzer.process_batch(batch)

        return registry, stats, time.time() - start_time

    def _create_progress_bar(self, total: int):
        if self.show_progress:
            return tqdm(
                total=total,
                desc="Processing files",
                unit="file",
                dynamic_ncols=True,
                mininterval=1
            )
        return nullcontext()
