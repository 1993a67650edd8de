"""
geo-hierarchy - parallel reader for geocoder hierarchy datasets.

This package turns newline-delimited hierarchy dumps (object id + JSON payload
per line) into a single list of entries ordered by object id, ready for
offline geocoder index construction.
"""

__version__ = "1.0.0"
__author__ = "Data Analytics Team"

from .config import ReaderConfig, MAX_READERS_COUNT
from .entry_parser import EntryParser, decode_object_id
from .exceptions import (
    HierarchyIngestError,
    SourceOpenError,
    SourceConsumedError,
    BadIdError,
    BadPayloadError,
    MergeError,
    ConfigurationError
)
from .hierarchy_reader import HierarchyReader, clamp_readers_count, read_hierarchy
from .line_source import LineSource
from .merger import merge_partitions
from .models import Entry, HIERARCHY_LEVELS, SENTINEL_TYPE
from .stats import ParsingStats
from .worker import Partition

__all__ = [
    'ReaderConfig',
    'MAX_READERS_COUNT',
    'EntryParser',
    'decode_object_id',
    'HierarchyIngestError',
    'SourceOpenError',
    'SourceConsumedError',
    'BadIdError',
    'BadPayloadError',
    'MergeError',
    'ConfigurationError',
    'HierarchyReader',
    'clamp_readers_count',
    'read_hierarchy',
    'LineSource',
    'merge_partitions',
    'Entry',
    'HIERARCHY_LEVELS',
    'SENTINEL_TYPE',
    'ParsingStats',
    'Partition'
]
