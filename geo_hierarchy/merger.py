"""
Deterministic k-way merge of sealed worker partitions.

Entries come out ascending by object id. Entries sharing an id are ordered by
the position of their partition in the input sequence, then by the order they
were inserted into that partition.
"""

import heapq
import logging
from typing import List, Optional, Sequence

from .exceptions import MergeError
from .models import Entry
from .worker import Partition


def merge_partitions(partitions: Sequence[Partition], strategy: str = 'scan',
                     logger: Optional[logging.Logger] = None) -> List[Entry]:
    """
    Merge partitions into one ordered list, draining them in the process.

    Args:
        partitions: Partitions in tie-break order; unsealed ones are sealed first
        strategy: 'scan' (linear head scan, for a handful of partitions) or
            'heap' (heapq, for many partitions); both give the same order
        logger: Optional logger instance

    Returns:
        All entries, ascending by object id

    Raises:
        MergeError: If the strategy is unknown or entries were lost
    """
    logger = logger or logging.getLogger(__name__)

    parts = [partition.seal() for partition in partitions]
    expected = sum(len(partition) for partition in parts)

    if strategy == 'scan':
        entries = _scan_merge(parts)
    elif strategy == 'heap':
        entries = _heap_merge(parts)
    else:
        raise MergeError(f"Unknown merge strategy: {strategy}", partition_count=len(parts))

    if len(entries) != expected:
        raise MergeError(
            f"Merged {len(entries)} entries out of {expected}",
            expected_count=expected,
            actual_count=len(entries),
            partition_count=len(parts)
        )

    logger.debug(f"Merged {expected:,} entries from {len(parts)} partitions using {strategy}")
    return entries


def _scan_merge(parts: List[Partition]) -> List[Entry]:
    entries: List[Entry] = []

    # |active| keeps the input order, so a strict comparison prefers the
    # lowest partition position on equal ids
    active = [partition for partition in parts if len(partition)]
    while active:
        best = 0
        best_id = active[0].peek_id()
        for position in range(1, len(active)):
            head_id = active[position].peek_id()
            if head_id < best_id:
                best, best_id = position, head_id

        partition = active[best]
        entries.append(partition.pop_min())
        if not len(partition):
            del active[best]

    return entries


def _heap_merge(parts: List[Partition]) -> List[Entry]:
    entries: List[Entry] = []

    heap = [(partition.peek_id(), position) for position, partition in enumerate(parts)
            if len(partition)]
    heapq.heapify(heap)

    while heap:
        _, position = heap[0]
        partition = parts[position]
        entries.append(partition.pop_min())
        if len(partition):
            heapq.heapreplace(heap, (partition.peek_id(), position))
        else:
            heapq.heappop(heap)

    return entries


def count_duplicate_ids(entries: Sequence[Entry]) -> int:
    """Count entries whose object id repeats the one before them."""
    duplicates = 0
    for previous, current in zip(entries, entries[1:]):
        if previous.osm_id == current.osm_id:
            duplicates += 1
    return duplicates
