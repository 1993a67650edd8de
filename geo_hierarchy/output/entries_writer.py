"""
Output generation for hierarchy ingestion runs.

This module provides the EntriesWriter class for exporting merged entries as
CSV and the run statistics as a JSON summary, using timestamped file names.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..exceptions import create_file_error
from ..models import Entry, HIERARCHY_LEVELS
from ..stats import ParsingStats


ENTRY_COLUMNS = ['osm_id', 'type', 'name'] + HIERARCHY_LEVELS


class EntriesWriter:
    """
    Writes ingestion results into an output directory.

    Object ids span the full unsigned 64-bit range, so the osm_id column is
    always stored as numpy uint64.
    """

    def __init__(self, output_directory: str, logger: Optional[logging.Logger] = None):
        """
        Initialize the EntriesWriter.

        Args:
            output_directory: Directory receiving the generated files
            logger: Optional logger instance for logging operations
        """
        self.output_directory = Path(output_directory)
        self.logger = logger or logging.getLogger(__name__)
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        self.output_directory.mkdir(parents=True, exist_ok=True)

        self.file_patterns = {
            'entries': 'hierarchy_entries_{timestamp}.csv',
            'summary': 'hierarchy_summary_{timestamp}.json'
        }

    @staticmethod
    def to_dataframe(entries: Sequence[Entry]) -> pd.DataFrame:
        """Flatten entries into a DataFrame, keeping their order."""
        if not entries:
            df = pd.DataFrame(columns=ENTRY_COLUMNS)
            df['osm_id'] = df['osm_id'].astype(np.uint64)
            return df

        df = pd.DataFrame.from_records([entry.to_record() for entry in entries],
                                       columns=ENTRY_COLUMNS)
        df['osm_id'] = np.array([entry.osm_id for entry in entries], dtype=np.uint64)
        return df

    def write_entries_csv(self, entries: Sequence[Entry], filename: Optional[str] = None) -> str:
        """
        Write entries to a CSV file.

        Returns:
            Path to the generated file
        """
        file_path = self.output_directory / (
            filename or self.file_patterns['entries'].format(timestamp=self.timestamp)
        )

        df = self.to_dataframe(entries)
        try:
            df.to_csv(file_path, index=False, encoding='utf-8')
        except OSError as e:
            raise create_file_error('write', str(file_path), e) from e

        self.logger.info(f"Wrote entries: {file_path} ({len(df):,} records)")
        return str(file_path)

    def build_summary(self, stats: ParsingStats, entries: Sequence[Entry],
                      workers: int) -> Dict:
        """Summary of a run: counters, readers used and entries per type."""
        type_counts: Dict[str, int] = {}
        if entries:
            type_counts = (
                pd.Series([entry.type for entry in entries])
                .value_counts()
                .sort_index()
                .astype(int)
                .to_dict()
            )

        return {
            'generated_at': datetime.now().isoformat(timespec='seconds'),
            'readers': workers,
            'stats': stats.to_dict(),
            'entries': len(entries),
            'entries_by_type': {str(k): int(v) for k, v in type_counts.items()}
        }

    def write_stats_summary(self, stats: ParsingStats, entries: Sequence[Entry],
                            workers: int, filename: Optional[str] = None) -> str:
        """
        Write the run summary as JSON.

        Returns:
            Path to the generated file
        """
        file_path = self.output_directory / (
            filename or self.file_patterns['summary'].format(timestamp=self.timestamp)
        )

        summary = self.build_summary(stats, entries, workers)
        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(summary, f, indent=2)
        except OSError as e:
            raise create_file_error('write', str(file_path), e) from e

        self.logger.info(f"Wrote summary: {file_path}")
        return str(file_path)

    def generate_all_outputs(self, entries: List[Entry], stats: ParsingStats,
                             workers: int) -> Dict[str, str]:
        """
        Generate all output files for a run.

        Returns:
            Dictionary mapping output type to generated file path
        """
        return {
            'entries': self.write_entries_csv(entries),
            'summary': self.write_stats_summary(stats, entries, workers)
        }
