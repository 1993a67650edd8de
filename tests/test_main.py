"""
Tests for the command-line entry point.
"""

import contextlib
import io
import logging
import tempfile
import unittest
from pathlib import Path

import main

from .fixtures import write_lines


class TestMain(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.addCleanup(self._reset_logger)

    @staticmethod
    def _reset_logger():
        logger = logging.getLogger('geo_hierarchy')
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    def run_main(self, argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            code = main.main(argv)
        return code, stdout.getvalue(), stderr.getvalue()

    def test_successful_run_with_output(self):
        path = write_lines(self.temp_dir.name, ['100 {"type":"A"}', '50 {"type":"B"}', 'garbage'])
        output = Path(self.temp_dir.name) / 'out'

        code, stdout, _ = self.run_main([
            '--input', path, '--readers', '2', '--output', str(output),
            '--log-level', 'ERROR'
        ])

        self.assertEqual(code, 0)
        self.assertIn('Entries loaded: 2', stdout)
        self.assertIn('Bad object ids: 1', stdout)
        self.assertEqual(len(list(output.glob('hierarchy_entries_*.csv'))), 1)
        self.assertEqual(len(list(output.glob('hierarchy_summary_*.json'))), 1)

    def test_missing_input(self):
        missing = str(Path(self.temp_dir.name) / 'missing.jsonl')
        code, _, stderr = self.run_main(['--input', missing, '--log-level', 'CRITICAL'])
        self.assertEqual(code, 4)
        self.assertIn('File Error', stderr)


if __name__ == '__main__':
    unittest.main()
