"""
Reader workers and their private partitions.

A worker pulls lines from the shared LineSource until it runs dry, parses them
outside any lock and keeps the successes in its own Partition. Partitions are
never shared while workers run; once a worker finishes, its partition is sealed
and only read by the merger.
"""

import logging
from collections import deque
from dataclasses import dataclass
from operator import itemgetter
from typing import Deque, List, Optional, Tuple

from .entry_parser import EntryParser
from .exceptions import BadIdError, BadPayloadError
from .line_source import LineSource
from .models import Entry
from .stats import ParsingStats, ProgressReporter, StatsAggregator


class Partition:
    """
    Ordered multimap from object id to entry, owned by a single worker.

    Entries are appended while the worker runs and stably sorted by id on
    seal(), so entries sharing an id keep their insertion order.
    """

    def __init__(self, index: int):
        self.index = index
        self._items: List[Tuple[int, Entry]] = []
        self._sealed: Optional[Deque[Tuple[int, Entry]]] = None

    def insert(self, osm_id: int, entry: Entry) -> None:
        if self._sealed is not None:
            raise RuntimeError(f"Partition {self.index} is sealed")
        self._items.append((osm_id, entry))

    def seal(self) -> 'Partition':
        """Sort the partition and freeze it against further inserts."""
        if self._sealed is None:
            self._sealed = deque(sorted(self._items, key=itemgetter(0)))
            self._items = []
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed is not None

    def peek_id(self) -> int:
        """Smallest object id left in the sealed partition."""
        return self._sealed[0][0]

    def pop_min(self) -> Entry:
        """Remove and return the entry with the smallest id."""
        return self._sealed.popleft()[1]

    def ids(self) -> List[int]:
        if self._sealed is not None:
            return [osm_id for osm_id, _ in self._sealed]
        return [osm_id for osm_id, _ in self._items]

    def __len__(self) -> int:
        if self._sealed is not None:
            return len(self._sealed)
        return len(self._items)


@dataclass
class WorkerResult:
    """Sealed partition and private counters of one finished worker."""

    index: int
    partition: Partition
    stats: ParsingStats
    lines_seen: int = 0


class HierarchyWorker:
    """Parses lines from a shared source into a private partition."""

    def __init__(self, index: int, source: LineSource, parser: EntryParser,
                 aggregator: StatsAggregator, progress: ProgressReporter,
                 logger: Optional[logging.Logger] = None):
        self.index = index
        self.source = source
        self.parser = parser
        self.aggregator = aggregator
        self.progress = progress
        self.logger = logger or logging.getLogger(__name__)

    def run(self) -> WorkerResult:
        """Consume the source until it is exhausted."""
        partition = Partition(self.index)
        stats = ParsingStats()
        lines_seen = 0

        while True:
            line = self.source.next_line()
            if line is None:
                break
            lines_seen += 1

            if not line:
                continue

            try:
                parsed = self.parser.parse(line)
            except BadIdError:
                self.logger.warning(f"Cannot read object id. Line: {line}")
                stats.bad_id += 1
                continue
            except BadPayloadError as e:
                self.logger.warning(f"Cannot decode payload ({e.reason}). Line: {line}")
                stats.bad_payload += 1
                continue

            if parsed is None:
                continue

            osm_id, entry = parsed
            if not entry.name:
                stats.empty_names += 1
            elif self.parser.is_name_mismatched(entry):
                stats.mismatched_names += 1

            partition.insert(osm_id, entry)
            stats.num_loaded += 1
            self.progress.advance()

        self.logger.debug(
            f"Reader {self.index} finished: {stats.num_loaded:,} entries from {lines_seen:,} lines"
        )
        self.aggregator.absorb(stats)
        return WorkerResult(index=self.index, partition=partition.seal(), stats=stats,
                            lines_seen=lines_seen)
