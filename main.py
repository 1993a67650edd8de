"""
Main entry point for the hierarchy reader.

This script provides the command-line interface for reading a hierarchy
dataset into an ordered entry list and optionally exporting it.
"""

import argparse
import logging
import sys
import time
import psutil
from pathlib import Path

# Add the current directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent))

from geo_hierarchy.config import ReaderConfig, MERGE_STRATEGIES, default_readers_count
from geo_hierarchy.exceptions import HierarchyIngestError, SourceOpenError
from geo_hierarchy.hierarchy_reader import HierarchyReader
from geo_hierarchy.logging_config import setup_logging
from geo_hierarchy.output.entries_writer import EntriesWriter
from geo_hierarchy.utils.error_handler import create_error_context, log_error_details


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Hierarchy Reader - Load a geocoder hierarchy dataset"
    )

    parser.add_argument(
        "--input",
        required=True,
        help="Path to the newline-delimited hierarchy file"
    )

    parser.add_argument(
        "--readers",
        type=int,
        default=default_readers_count(),
        help="Number of parallel readers, clamped to 1-8 (default: CPU count)"
    )

    parser.add_argument(
        "--merge-strategy",
        choices=list(MERGE_STRATEGIES),
        default="scan",
        help="Partition merge strategy (default: scan)"
    )

    parser.add_argument(
        "--output",
        help="Optional output directory for the entries CSV and run summary"
    )

    parser.add_argument(
        "--name-match-threshold",
        type=int,
        default=90,
        help="Minimum name/address similarity before a name counts as mismatched (0-100, default: 90)"
    )

    parser.add_argument(
        "--log-batch",
        type=int,
        default=100000,
        help="Log progress every N loaded entries (default: 100000)"
    )

    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while reading"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-file",
        help="Optional log file path"
    )

    return parser.parse_args(argv)


class PerformanceMonitor:
    """Monitor and log performance metrics during application execution."""

    def __init__(self, logger=None):
        """Initialize performance monitor."""
        self.logger = logger
        self.process = psutil.Process()
        self.start_time = time.time()
        self.checkpoints = {}
        self.memory_snapshots = []

    def log_memory_usage(self, checkpoint_name: str):
        """Log current memory usage."""
        memory_mb = self.process.memory_info().rss / 1024 / 1024
        self.memory_snapshots.append({
            'checkpoint': checkpoint_name,
            'timestamp': time.time(),
            'memory_mb': memory_mb
        })

        if self.logger:
            self.logger.info(f"Memory usage at {checkpoint_name}: {memory_mb:.1f} MB")

    def start_checkpoint(self, name: str):
        """Start timing a checkpoint."""
        self.checkpoints[name] = {'start': time.time()}
        self.log_memory_usage(f"{name}_start")

    def end_checkpoint(self, name: str):
        """End timing a checkpoint."""
        if name in self.checkpoints:
            duration = time.time() - self.checkpoints[name]['start']
            self.checkpoints[name]['duration'] = duration
            self.log_memory_usage(f"{name}_end")

            if self.logger:
                self.logger.info(f"Checkpoint {name} completed in {duration:.2f} seconds")

    def get_peak_memory(self) -> float:
        """Get peak memory usage in MB."""
        if not self.memory_snapshots:
            return 0.0
        return max(snapshot['memory_mb'] for snapshot in self.memory_snapshots)

    def get_performance_summary(self) -> dict:
        """Get performance summary."""
        return {
            'total_execution_time': time.time() - self.start_time,
            'peak_memory_mb': self.get_peak_memory(),
            'checkpoints': self.checkpoints.copy()
        }


def print_processing_summary(stats, workers: int, perf_summary: dict):
    """Print a summary of the run to console."""
    print("\n" + "=" * 60)
    print("HIERARCHY INGESTION COMPLETED")
    print("=" * 60)

    print(f"\nReading Summary:")
    print(f"  Readers: {workers}")
    print(f"  Entries loaded: {stats.num_loaded:,}")
    print(f"  Bad object ids: {stats.bad_id:,}")
    print(f"  Bad payloads: {stats.bad_payload:,}")
    print(f"  Empty names: {stats.empty_names:,}")
    print(f"  Mismatched names: {stats.mismatched_names:,}")
    print(f"  Duplicate object ids: {stats.duplicate_ids:,}")

    print(f"\nPerformance Summary:")
    print(f"  Total execution time: {perf_summary['total_execution_time']:.2f} seconds")
    print(f"  Peak memory usage: {perf_summary['peak_memory_mb']:.1f} MB")

    reading = perf_summary['checkpoints'].get('reading', {})
    if reading.get('duration'):
        rate = stats.num_loaded / reading['duration']
        print(f"  Reading rate: {rate:.0f} entries/second")


def main(argv=None):
    """Main application entry point."""
    args = parse_arguments(argv)

    try:
        config = ReaderConfig(
            input_file=args.input,
            readers_count=args.readers,
            merge_strategy=args.merge_strategy,
            log_batch=args.log_batch,
            show_progress=args.progress,
            name_match_threshold=args.name_match_threshold,
            output_directory=args.output,
            log_level=args.log_level,
            log_file=args.log_file
        )

        logger = setup_logging(config)
        logger.info(f"Configuration: {config.to_dict()}")

        perf_monitor = PerformanceMonitor(logger.logger)

        with HierarchyReader(config=config, logger=logger.logger) as reader:
            logger.log_phase_start("hierarchy reading")
            phase_start = time.time()
            perf_monitor.start_checkpoint("reading")
            entries, stats = reader.read_entries()
            perf_monitor.end_checkpoint("reading")
            logger.log_phase_complete("hierarchy reading", len(entries), time.time() - phase_start)
            workers = reader.workers_spawned

        logger.log_parsing_complete(stats, workers)

        if config.output_directory:
            perf_monitor.start_checkpoint("output_generation")
            writer = EntriesWriter(config.output_directory, logger.logger)
            generated_files = writer.generate_all_outputs(entries, stats, workers)
            perf_monitor.end_checkpoint("output_generation")

            print(f"\nGenerated Output Files:")
            for file_type, file_path in generated_files.items():
                print(f"  {file_type}: {Path(file_path).name}")

        print_processing_summary(stats, workers, perf_monitor.get_performance_summary())
        return 0

    except SourceOpenError as e:
        log_error_details(logging.getLogger("geo_hierarchy"), e,
                          create_error_context("read_entries", input_file=args.input))
        print(f"\nFile Error: {e}", file=sys.stderr)
        print("Please check that the input file exists and is readable.", file=sys.stderr)
        return 4

    except HierarchyIngestError as e:
        log_error_details(logging.getLogger("geo_hierarchy"), e,
                          create_error_context("read_entries", input_file=args.input))
        print(f"\nIngestion Error: {e}", file=sys.stderr)
        return 3

    except KeyboardInterrupt:
        print("\nProcess interrupted by user", file=sys.stderr)
        return 130

    except Exception as e:
        print(f"\nError: Unexpected error: {e}", file=sys.stderr)
        print("Please check the log files for more details.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
