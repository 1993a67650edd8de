"""
Parsing statistics and progress reporting.

Workers count into their own ParsingStats and hand the totals to a shared
StatsAggregator once they finish, so the aggregate is exact no matter how the
lines were spread across workers. ProgressReporter only drives informational
"Read N entries" messages and an optional tqdm bar.
"""

import itertools
import logging
import threading
from dataclasses import dataclass, fields, replace
from typing import Dict, Optional

from tqdm import tqdm


@dataclass
class ParsingStats:
    """Counters for one hierarchy ingestion run."""

    num_loaded: int = 0
    bad_id: int = 0
    bad_payload: int = 0
    empty_names: int = 0
    mismatched_names: int = 0
    duplicate_ids: int = 0

    @property
    def num_rejected(self) -> int:
        return self.bad_id + self.bad_payload

    def merge(self, other: 'ParsingStats') -> None:
        """Add every counter of |other| into this instance."""
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))

    def to_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class StatsAggregator:
    """Sums per-worker statistics under a lock."""

    def __init__(self):
        self._lock = threading.Lock()
        self._totals = ParsingStats()
        self._absorbed = 0

    def absorb(self, worker_stats: ParsingStats) -> None:
        with self._lock:
            self._totals.merge(worker_stats)
            self._absorbed += 1

    @property
    def workers_absorbed(self) -> int:
        with self._lock:
            return self._absorbed

    def snapshot(self) -> ParsingStats:
        """Return a copy of the current totals."""
        with self._lock:
            return replace(self._totals)


class ProgressReporter:
    """
    Logs a message every |log_batch| loaded entries across all workers.

    The shared counter is an itertools.count, whose next() is atomic in
    CPython, so reporting never takes a lock. Milestones are eventually
    consistent and are not used for any result.
    """

    def __init__(self, log_batch: int = 100000, logger: Optional[logging.Logger] = None,
                 show_progress: bool = False):
        self.log_batch = log_batch
        self.logger = logger or logging.getLogger(__name__)
        self._counter = itertools.count(1)
        self._bar = tqdm(desc="Reading entries", unit=" entries") if show_progress else None

    def advance(self) -> None:
        """Record one loaded entry."""
        loaded = next(self._counter)
        if loaded % self.log_batch == 0:
            self.logger.info(f"Read {loaded:,} entries")
        if self._bar is not None:
            self._bar.update(1)

    def finish(self, total_loaded: int) -> None:
        """Emit the final count unless the last milestone already reported it."""
        if total_loaded % self.log_batch != 0:
            self.logger.info(f"Read {total_loaded:,} entries")
        if self._bar is not None:
            self._bar.close()
            self._bar = None
