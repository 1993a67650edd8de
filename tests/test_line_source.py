"""
Tests for the shared line source.
"""

import io
import logging
import tempfile
import threading
import unittest
from pathlib import Path

from geo_hierarchy.exceptions import SourceOpenError
from geo_hierarchy.line_source import LineSource
from geo_hierarchy.utils.error_handler import RetryConfig

from .fixtures import write_lines


class TestLineSource(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)

    def test_reads_lines_in_order(self):
        path = write_lines(self.temp_dir.name, ['1 {}', '', '2 {}'])
        with LineSource(path) as source:
            self.assertEqual(source.next_line(), '1 {}')
            self.assertEqual(source.next_line(), '')
            self.assertEqual(source.next_line(), '2 {}')
            self.assertIsNone(source.next_line())
            self.assertIsNone(source.next_line())
            self.assertEqual(source.lines_read, 3)
            self.assertTrue(source.exhausted)

    def test_strips_windows_line_endings(self):
        path = Path(self.temp_dir.name) / 'crlf.jsonl'
        path.write_bytes(b'1 {}\r\n2 {}\r\n')
        with LineSource(path) as source:
            self.assertEqual(source.next_line(), '1 {}')
            self.assertEqual(source.next_line(), '2 {}')

    def test_last_line_without_newline(self):
        path = Path(self.temp_dir.name) / 'tail.jsonl'
        path.write_text('1 {}\n2 {}', encoding='utf-8')
        with LineSource(path) as source:
            self.assertEqual([source.next_line(), source.next_line()], ['1 {}', '2 {}'])
            self.assertIsNone(source.next_line())

    def test_missing_file_is_fatal(self):
        missing = str(Path(self.temp_dir.name) / 'missing.jsonl')
        with self.assertRaises(SourceOpenError) as ctx:
            LineSource(missing)
        self.assertEqual(ctx.exception.file_path, missing)
        self.assertEqual(ctx.exception.operation, 'open')
        self.assertIsInstance(ctx.exception.original_error, FileNotFoundError)

    def test_directory_is_fatal(self):
        with self.assertRaises(SourceOpenError):
            LineSource(self.temp_dir.name)

    def test_open_failure_is_logged(self):
        logger = logging.getLogger('tests.line_source')
        missing = str(Path(self.temp_dir.name) / 'missing.jsonl')
        with self.assertLogs(logger, level='ERROR') as logs:
            with self.assertRaises(SourceOpenError):
                LineSource(missing, retry_config=RetryConfig(max_attempts=1), logger=logger)
        self.assertIn('Failed to open file', logs.output[0])
        self.assertIn(missing, logs.output[0])

    def test_from_stream(self):
        source = LineSource.from_stream(io.StringIO('a\nb\n'), source_name='memory')
        self.assertEqual(source.source_name, 'memory')
        self.assertEqual(source.next_line(), 'a')
        self.assertEqual(source.next_line(), 'b')
        self.assertIsNone(source.next_line())

    def test_close_stops_reading(self):
        source = LineSource.from_stream(io.StringIO('a\nb\n'))
        source.close()
        self.assertIsNone(source.next_line())

    def test_concurrent_readers_get_each_line_once(self):
        lines = [f'{n} {{}}' for n in range(5000)]
        path = write_lines(self.temp_dir.name, lines)
        source = LineSource(path)
        collected = [[] for _ in range(8)]

        def consume(bucket):
            while True:
                line = source.next_line()
                if line is None:
                    return
                bucket.append(line)

        threads = [threading.Thread(target=consume, args=(bucket,)) for bucket in collected]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        source.close()

        handed_out = [line for bucket in collected for line in bucket]
        self.assertEqual(len(handed_out), len(lines))
        self.assertEqual(sorted(handed_out), sorted(lines))
        for bucket in collected:
            # Each reader sees its lines in file order
            numbers = [int(line.split()[0]) for line in bucket]
            self.assertEqual(numbers, sorted(numbers))


if __name__ == '__main__':
    unittest.main()
