"""
Shared line cursor over a hierarchy dataset.

A LineSource is handed to every reader worker. Only the act of reading one
line from the underlying stream is serialized; trimming and everything that
follows happen outside the lock.
"""

import logging
import threading
from pathlib import Path
from typing import Optional, TextIO, Union

from .exceptions import FileAccessError, SourceOpenError
from .utils.error_handler import RetryConfig, safe_file_operation


class LineSource:
    """Thread-safe, one-line-at-a-time reader over a text source."""

    def __init__(self, file_path: Union[str, Path], encoding: str = 'utf-8',
                 retry_config: Optional[RetryConfig] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Open the source. Failing to open it is fatal.

        Args:
            file_path: Path to the newline-delimited hierarchy file
            encoding: Text encoding of the file
            retry_config: Optional retry behaviour for opening the file
            logger: Optional logger instance

        Raises:
            SourceOpenError: If the file cannot be opened
        """
        self.logger = logger or logging.getLogger(__name__)
        self.source_name = str(file_path)

        path = Path(file_path)
        try:
            stream = safe_file_operation(
                operation=lambda: open(path, 'r', encoding=encoding, errors='replace'),
                file_path=path,
                operation_name="open",
                retry_config=retry_config,
                logger=self.logger
            )
        except FileAccessError as e:
            self.logger.error(f"Failed to open file {self.source_name}: {e.original_error}")
            raise SourceOpenError(
                f"Failed to open file: {self.source_name}",
                file_path=self.source_name,
                original_error=e.original_error
            ) from e

        self._init_stream(stream)

    @classmethod
    def from_stream(cls, stream: TextIO, source_name: str = '<stream>',
                    logger: Optional[logging.Logger] = None) -> 'LineSource':
        """Wrap an already open text stream."""
        source = cls.__new__(cls)
        source.logger = logger or logging.getLogger(__name__)
        source.source_name = source_name
        source._init_stream(stream)
        return source

    def _init_stream(self, stream: TextIO):
        self._stream = stream
        self._lock = threading.Lock()
        self._lines_read = 0
        self._exhausted = False

    def next_line(self) -> Optional[str]:
        """
        Return the next line without its line terminator, or None once the
        source is exhausted.
        """
        with self._lock:
            if self._exhausted:
                return None
            line = self._stream.readline()
            if not line:
                self._exhausted = True
                return None
            self._lines_read += 1

        return line.rstrip('\r\n')

    @property
    def lines_read(self) -> int:
        return self._lines_read

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    def close(self):
        with self._lock:
            self._exhausted = True
            if not self._stream.closed:
                self._stream.close()

    def __enter__(self) -> 'LineSource':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
