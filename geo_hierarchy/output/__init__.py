"""
Output writers.
"""

from .entries_writer import EntriesWriter, ENTRY_COLUMNS

__all__ = ['EntriesWriter', 'ENTRY_COLUMNS']
