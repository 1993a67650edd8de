"""
Hierarchy reader orchestration.

This module provides the HierarchyReader class that runs a bounded set of
reader workers over one shared line source, waits for all of them and merges
their partitions into a single sequence ordered by object id.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .config import MAX_READERS_COUNT, ReaderConfig
from .entry_parser import EntryParser
from .exceptions import SourceConsumedError
from .line_source import LineSource
from .merger import count_duplicate_ids, merge_partitions
from .models import Entry
from .stats import ParsingStats, ProgressReporter, StatsAggregator
from .utils.error_handler import RetryConfig
from .worker import HierarchyWorker, WorkerResult


def clamp_readers_count(requested: Optional[int]) -> int:
    """Clamp a requested number of readers to [1, MAX_READERS_COUNT]."""
    if requested is None:
        return 1
    return max(1, min(int(requested), MAX_READERS_COUNT))


class HierarchyReader:
    """
    Reads a hierarchy dataset into an ordered list of entries.

    The source is opened on construction; an unreadable source is the only
    fatal condition. Malformed lines are skipped and counted in the returned
    ParsingStats.
    """

    def __init__(self, file_path: Union[str, Path, None] = None,
                 config: Optional[ReaderConfig] = None,
                 logger: Optional[logging.Logger] = None,
                 source: Optional[LineSource] = None):
        """
        Initialize the HierarchyReader.

        Args:
            file_path: Path to the hierarchy file; defaults to config.input_file
            config: Optional configuration; built from file_path when omitted
            logger: Optional logger instance for logging operations
            source: Optional already opened LineSource to read instead of a file

        Raises:
            SourceOpenError: If the hierarchy file cannot be opened
        """
        if config is None:
            if file_path is None and source is None:
                raise ValueError("Either file_path, config or source is required")
            config = ReaderConfig(input_file=str(file_path if file_path is not None
                                                 else source.source_name))
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        if source is None:
            source = LineSource(
                file_path if file_path is not None else config.input_file,
                encoding=config.encoding,
                retry_config=RetryConfig(max_attempts=config.open_attempts),
                logger=self.logger
            )
        self.source = source

        self.parser = EntryParser(
            name_match_threshold=config.name_match_threshold,
            logger=self.logger
        )
        self.workers_spawned = 0

    def read_entries(self, readers_count: Optional[int] = None) -> Tuple[List[Entry], ParsingStats]:
        """
        Read every line of the source and return the merged entries.

        Args:
            readers_count: Number of parallel readers, clamped to [1, 8];
                defaults to config.readers_count

        Returns:
            Tuple of (entries ascending by object id, parsing statistics)

        Raises:
            SourceConsumedError: If the source was already read or closed; a
                reader reads its source once, so build a new one to read again
        """
        if self.source.exhausted:
            raise SourceConsumedError(
                f"Source {self.source.source_name} was already read",
                source_name=self.source.source_name
            )

        if readers_count is None:
            readers_count = self.config.readers_count
        readers_count = clamp_readers_count(readers_count)

        self.logger.info("Reading entries...")
        start_time = time.time()

        aggregator = StatsAggregator()
        progress = ProgressReporter(
            log_batch=self.config.log_batch,
            logger=self.logger,
            show_progress=self.config.show_progress
        )
        workers = [
            HierarchyWorker(index, self.source, self.parser, aggregator, progress, self.logger)
            for index in range(readers_count)
        ]
        self.workers_spawned = len(workers)

        try:
            results = self._run_workers(workers)
        finally:
            self.source.close()

        stats = aggregator.snapshot()
        progress.finish(stats.num_loaded)
        self.logger.debug(
            f"Read {self.source.lines_read:,} lines with {readers_count} readers "
            f"in {time.time() - start_time:.2f} seconds"
        )

        self.logger.info("Sorting entries...")
        entries = merge_partitions(
            [result.partition for result in results],
            strategy=self.config.merge_strategy,
            logger=self.logger
        )
        stats.duplicate_ids = count_duplicate_ids(entries)

        return entries, stats

    def _run_workers(self, workers: List[HierarchyWorker]) -> List[WorkerResult]:
        # Results are collected in worker order, which fixes the merge tie-break
        with ThreadPoolExecutor(max_workers=len(workers),
                                thread_name_prefix="hierarchy-reader") as executor:
            futures = [executor.submit(worker.run) for worker in workers]
            return [future.result() for future in futures]

    def close(self):
        self.source.close()

    def __enter__(self) -> 'HierarchyReader':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def read_hierarchy(file_path: Union[str, Path], readers_count: Optional[int] = None,
                   config: Optional[ReaderConfig] = None,
                   logger: Optional[logging.Logger] = None) -> Tuple[List[Entry], ParsingStats]:
    """Open a hierarchy file and read it in one call."""
    with HierarchyReader(file_path, config=config, logger=logger) as reader:
        return reader.read_entries(readers_count)
