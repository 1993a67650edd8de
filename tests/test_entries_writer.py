"""
Tests for exporting entries and run summaries.
"""

import json
import tempfile
import unittest
from pathlib import Path

import numpy as np
import pandas as pd

from geo_hierarchy.models import Entry
from geo_hierarchy.output.entries_writer import ENTRY_COLUMNS, EntriesWriter
from geo_hierarchy.stats import ParsingStats


class TestEntriesWriter(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.writer = EntriesWriter(self.temp_dir.name)
        self.entries = [
            Entry(osm_id=5, type='locality', name='Moscow',
                  address={'country': 'Russia', 'locality': 'Moscow'}),
            Entry(osm_id=(1 << 64) - 1, type='street', name='Tverskaya',
                  address={'street': 'Tverskaya'}),
        ]

    def test_dataframe_keeps_full_unsigned_ids(self):
        df = EntriesWriter.to_dataframe(self.entries)
        self.assertEqual(list(df.columns), ENTRY_COLUMNS)
        self.assertEqual(df['osm_id'].dtype, np.uint64)
        self.assertEqual(int(df['osm_id'].iloc[1]), (1 << 64) - 1)
        self.assertEqual(df['country'].tolist(), ['Russia', ''])

    def test_empty_dataframe(self):
        df = EntriesWriter.to_dataframe([])
        self.assertTrue(df.empty)
        self.assertEqual(list(df.columns), ENTRY_COLUMNS)

    def test_write_entries_csv(self):
        path = self.writer.write_entries_csv(self.entries, filename='entries.csv')
        df = pd.read_csv(path, dtype={'osm_id': str}, keep_default_na=False)
        self.assertEqual(df['osm_id'].tolist(), ['5', str((1 << 64) - 1)])
        self.assertEqual(df['name'].tolist(), ['Moscow', 'Tverskaya'])

    def test_write_stats_summary(self):
        stats = ParsingStats(num_loaded=2, bad_id=1)
        path = self.writer.write_stats_summary(stats, self.entries, workers=4,
                                               filename='summary.json')
        with open(path, encoding='utf-8') as f:
            summary = json.load(f)
        self.assertEqual(summary['readers'], 4)
        self.assertEqual(summary['entries'], 2)
        self.assertEqual(summary['stats']['bad_id'], 1)
        self.assertEqual(summary['entries_by_type'], {'locality': 1, 'street': 1})

    def test_generate_all_outputs(self):
        files = self.writer.generate_all_outputs(self.entries, ParsingStats(num_loaded=2), 1)
        self.assertEqual(set(files), {'entries', 'summary'})
        for path in files.values():
            self.assertTrue(Path(path).exists())


if __name__ == '__main__':
    unittest.main()
