"""
Configuration management for the hierarchy reader.

This module provides the dataclass holding input, concurrency, parsing and
logging options for a hierarchy ingestion run.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional
import os
from pathlib import Path

from .exceptions import ConfigurationError


# Upper bound on parallel readers; more only contend on the shared line source
MAX_READERS_COUNT = 8

MERGE_STRATEGIES = ('scan', 'heap')


def default_readers_count() -> int:
    """Number of readers to use when none is requested."""
    return min(os.cpu_count() or 1, MAX_READERS_COUNT)


@dataclass
class ReaderConfig:
    """Configuration class for hierarchy ingestion."""

    # Input file path
    input_file: str

    # Concurrency
    readers_count: int = field(default_factory=default_readers_count)
    merge_strategy: str = 'scan'

    # Input decoding
    encoding: str = 'utf-8'
    open_attempts: int = 1

    # Progress is logged every |log_batch| loaded entries
    log_batch: int = 100000
    show_progress: bool = False

    # Names scoring below this rapidfuzz ratio against their own address level
    # are counted as mismatched
    name_match_threshold: int = 90

    # Output configuration
    output_directory: Optional[str] = None

    # Logging configuration
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_options()
        self._ensure_output_directory()

    def _validate_options(self):
        if self.merge_strategy not in MERGE_STRATEGIES:
            raise ConfigurationError(
                f"Unknown merge strategy: {self.merge_strategy}",
                config_key='merge_strategy',
                config_value=self.merge_strategy,
                valid_values=list(MERGE_STRATEGIES)
            )

        if self.log_batch <= 0:
            raise ConfigurationError(
                f"Log batch must be positive: {self.log_batch}",
                config_key='log_batch',
                config_value=self.log_batch
            )

        if not 0 <= self.name_match_threshold <= 100:
            raise ConfigurationError(
                f"Name match threshold must be between 0 and 100: {self.name_match_threshold}",
                config_key='name_match_threshold',
                config_value=self.name_match_threshold
            )

        if self.open_attempts < 1:
            raise ConfigurationError(
                f"Open attempts must be at least 1: {self.open_attempts}",
                config_key='open_attempts',
                config_value=self.open_attempts
            )

    def _ensure_output_directory(self):
        """Create output directory if it doesn't exist."""
        if self.output_directory:
            Path(self.output_directory).mkdir(parents=True, exist_ok=True)

    @classmethod
    def from_dict(cls, config_dict: Dict) -> 'ReaderConfig':
        """Create configuration from dictionary."""
        return cls(**config_dict)

    def to_dict(self) -> Dict:
        """Convert configuration to dictionary."""
        return {
            'input_file': self.input_file,
            'readers_count': self.readers_count,
            'merge_strategy': self.merge_strategy,
            'encoding': self.encoding,
            'open_attempts': self.open_attempts,
            'log_batch': self.log_batch,
            'show_progress': self.show_progress,
            'name_match_threshold': self.name_match_threshold,
            'output_directory': self.output_directory,
            'log_level': self.log_level,
            'log_file': self.log_file
        }
