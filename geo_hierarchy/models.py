"""
Data models for the hierarchy reader.

This module defines the entry record produced for every hierarchy line and the
ordered list of administrative levels an entry can describe.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any


# Administrative levels from the least to the most specific
HIERARCHY_LEVELS: List[str] = [
    'country',
    'region',
    'subregion',
    'locality',
    'suburb',
    'sublocality',
    'street',
    'building',
]

# Discriminant meaning "not a real record"; such entries are always dropped
SENTINEL_TYPE = 'count'


@dataclass
class Entry:
    """Represents one parsed hierarchy record."""

    osm_id: int
    type: str
    name: str = ''

    # Level name -> value, only for the levels present in the payload
    address: Dict[str, str] = field(default_factory=dict)

    # Decoded payload, kept for downstream consumers
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_sentinel(self) -> bool:
        return self.type.strip().lower() == SENTINEL_TYPE

    def get_hierarchical_path(self) -> List[tuple]:
        """
        Get list of (level_name, value) tuples in hierarchical order.

        Example:
            [('country', 'Russia'), ('region', 'Moscow'), ('street', 'Tverskaya')]
        """
        return [(level, self.address[level]) for level in HIERARCHY_LEVELS
                if self.address.get(level)]

    def to_record(self) -> Dict[str, Any]:
        """Flatten the entry into a single row for tabular output."""
        record = {
            'osm_id': self.osm_id,
            'type': self.type,
            'name': self.name,
        }
        for level in HIERARCHY_LEVELS:
            record[level] = self.address.get(level, '')
        return record
