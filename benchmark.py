#!/usr/bin/env python3
"""
Performance benchmarking script for the hierarchy reader.

Generates a synthetic hierarchy dataset (or uses an existing one) and reads it
with every reader count from 1 to 8, reporting throughput and memory use and
checking that every run produced the same entries and statistics.
"""

import sys
import time
import psutil
import gc
import argparse
import json
import random
from pathlib import Path
from datetime import datetime

import numpy as np
import pandas as pd
from tqdm import tqdm

# Add the current directory to Python path
sys.path.insert(0, str(Path(__file__).parent))

from geo_hierarchy.config import MAX_READERS_COUNT, ReaderConfig
from geo_hierarchy.hierarchy_reader import HierarchyReader
from geo_hierarchy.logging_config import setup_logging
from geo_hierarchy.models import HIERARCHY_LEVELS


def generate_dataset(path: Path, count: int, bad_ratio: float = 0.01, seed: int = 42) -> Path:
    """Write |count| synthetic hierarchy lines, a fraction of them malformed."""
    rng = random.Random(seed)
    with open(path, 'w', encoding='utf-8') as f:
        for n in tqdm(range(count), desc="Generating dataset", unit=" lines"):
            if rng.random() < bad_ratio:
                f.write(f"bad-{n} {{}}\n")
                continue

            osm_id = rng.randint(-(1 << 63), (1 << 63) - 1)
            depth = rng.randint(1, len(HIERARCHY_LEVELS))
            address = {level: f"{level} {rng.randint(0, 999)}" for level in HIERARCHY_LEVELS[:depth]}
            payload = {'properties': {'locales': {'default': {
                'name': address[HIERARCHY_LEVELS[depth - 1]],
                'address': address
            }}}}
            f.write(f"{osm_id} {json.dumps(payload)}\n")
    return path


class ReaderBenchmark:
    """Runs the reader over one dataset with different reader counts."""

    def __init__(self, dataset: Path, output_dir: str = "benchmark_results",
                 merge_strategy: str = 'scan'):
        self.dataset = dataset
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(exist_ok=True)
        self.merge_strategy = merge_strategy
        self.process = psutil.Process()
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.results = []

    def get_memory_usage(self) -> float:
        """Get current memory usage in MB."""
        return self.process.memory_info().rss / 1024 / 1024

    def run_once(self, readers_count: int):
        gc.collect()
        config = ReaderConfig(input_file=str(self.dataset), merge_strategy=self.merge_strategy,
                              log_level="ERROR")
        logger = setup_logging(config)

        memory_start = self.get_memory_usage()
        start = time.time()
        with HierarchyReader(config=config, logger=logger.logger) as reader:
            entries, stats = reader.read_entries(readers_count)
        duration = time.time() - start

        self.results.append({
            'readers': readers_count,
            'duration_seconds': duration,
            'entries': len(entries),
            'entries_per_second': len(entries) / duration if duration > 0 else 0.0,
            'memory_growth_mb': self.get_memory_usage() - memory_start,
            'bad_id': stats.bad_id,
        })
        return entries, stats

    def run(self) -> bool:
        """Benchmark every reader count; return True if all runs agree."""
        baseline = None
        consistent = True
        for readers_count in range(1, MAX_READERS_COUNT + 1):
            print(f"Reading with {readers_count} reader(s)...")
            entries, stats = self.run_once(readers_count)
            ids = np.fromiter((entry.osm_id for entry in entries), dtype=np.uint64,
                              count=len(entries))
            if baseline is None:
                baseline = (ids, stats)
            elif not (np.array_equal(ids, baseline[0]) and stats == baseline[1]):
                print(f"✗ Output with {readers_count} readers differs from the single reader run")
                consistent = False
            del entries
        return consistent

    def report(self) -> str:
        df = pd.DataFrame(self.results)
        print("\n" + df.to_string(index=False, float_format=lambda v: f"{v:.2f}"))

        report_path = self.output_dir / f"benchmark_{self.timestamp}.json"
        with open(report_path, 'w', encoding='utf-8') as f:
            json.dump({
                'dataset': str(self.dataset),
                'merge_strategy': self.merge_strategy,
                'results': self.results
            }, f, indent=2)
        print(f"\nBenchmark report saved to: {report_path}")
        return str(report_path)


def main():
    parser = argparse.ArgumentParser(description="Benchmark the hierarchy reader")
    parser.add_argument("--input", help="Existing hierarchy file (generated when omitted)")
    parser.add_argument("--lines", type=int, default=200000, help="Lines to generate (default: 200000)")
    parser.add_argument("--merge-strategy", choices=["scan", "heap"], default="scan")
    parser.add_argument("--output", default="benchmark_results", help="Directory for the report")
    args = parser.parse_args()

    output_dir = Path(args.output)
    output_dir.mkdir(exist_ok=True)

    if args.input:
        dataset = Path(args.input)
    else:
        dataset = generate_dataset(output_dir / "synthetic_hierarchy.jsonl", args.lines)

    benchmark = ReaderBenchmark(dataset, str(output_dir), args.merge_strategy)
    consistent = benchmark.run()
    benchmark.report()

    if consistent:
        print("✓ All reader counts produced identical output")
        return 0
    return 1


if __name__ == "__main__":
    sys.exit(main())
