"""
Logging configuration for the hierarchy reader.

This module provides the console/file logging setup used by the command-line
front end. Library components only ever receive a plain logging.Logger, so any
sink can be plugged in by the caller.
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime


class HierarchyLogger:
    """Custom logger for hierarchy ingestion runs."""

    def __init__(self, name: str = "geo_hierarchy", level: str = "INFO",
                 log_file: Optional[str] = None):
        """
        Initialize the hierarchy logger.

        Args:
            name: Logger name
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Optional file path for log output
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))

        # Clear any existing handlers
        self.logger.handlers.clear()

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        self.logger.addHandler(console_handler)

        if log_file:
            self._setup_file_handler(log_file, formatter)

    def _setup_file_handler(self, log_file: str, formatter: logging.Formatter):
        """Set up file logging handler."""
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setFormatter(formatter)
        self.logger.addHandler(file_handler)

    def info(self, message: str):
        self.logger.info(message)

    def debug(self, message: str):
        self.logger.debug(message)

    def warning(self, message: str):
        self.logger.warning(message)

    def error(self, message: str):
        self.logger.error(message)

    def log_phase_start(self, phase_name: str):
        """Log the start of a processing phase."""
        self.info("-" * 40)
        self.info(f"Starting {phase_name}")
        self.info("-" * 40)

    def log_phase_complete(self, phase_name: str, count: int, duration: float):
        """Log the completion of a processing phase."""
        self.info(f"Completed {phase_name}")
        self.info(f"Records processed: {count:,}")
        self.info(f"Duration: {duration:.2f} seconds")

    def log_parsing_complete(self, stats, workers: int):
        """Log ingestion completion with statistics."""
        self.info("=" * 60)
        self.info("HIERARCHY INGESTION COMPLETED")
        self.info("=" * 60)
        self.info(f"Readers used: {workers}")
        self.info(f"Entries loaded: {stats.num_loaded:,}")
        self.info(f"Lines with bad object ids: {stats.bad_id:,}")
        self.info(f"Lines with bad payloads: {stats.bad_payload:,}")
        self.info(f"Entries without names: {stats.empty_names:,}")
        self.info(f"Entries with mismatched names: {stats.mismatched_names:,}")
        self.info(f"Duplicate object ids: {stats.duplicate_ids:,}")
        self.info(f"Completed at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")


def setup_logging(config) -> HierarchyLogger:
    """
    Set up logging based on configuration.

    Args:
        config: ReaderConfig instance

    Returns:
        Configured HierarchyLogger instance
    """
    log_file = None
    if config.log_file:
        log_file = config.log_file
    elif config.output_directory:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = Path(config.output_directory) / f"hierarchy_log_{timestamp}.txt"

    return HierarchyLogger(
        name="geo_hierarchy",
        level=config.log_level,
        log_file=str(log_file) if log_file else None
    )
