#!/usr/bin/env python3
"""Benchmark scanning and index building for the vaults in obsidian.json.

Usage:
    uv run python scripts/benchmark.py --config ~/.config/obsidian/obsidian.json --rounds 5
"""

import argparse
import sys
import time
from pathlib import Path

# Add the src directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


def format_time(seconds: float) -> str:
    """Format time in human readable format."""
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    return f"{seconds:.2f}s"


def benchmark_round(config_path: Path) -> dict:
    """Time one full rebuild, split into its phases."""
    from vault_index.index.builder import Index, build_index_entries
    from vault_index.index.config import read_vaults
    from vault_index.index.scanner import scan_vault

    start = time.perf_counter()
    vaults = read_vaults(config_path)
    config_time = time.perf_counter() - start

    start = time.perf_counter()
    directories = []
    notes = []
    for vault in vaults:
        scan = scan_vault(vault)
        directories += scan.directories
        notes += scan.notes
    scan_time = time.perf_counter() - start

    start = time.perf_counter()
    Index().replace(build_index_entries(vaults, notes))
    build_time = time.perf_counter() - start

    return {
        "vaults": len(vaults),
        "directories": len(directories),
        "notes": len(notes),
        "config_time": config_time,
        "scan_time": scan_time,
        "build_time": build_time,
    }


def print_results_table(results: list[dict]):
    """Print benchmark results in a table format."""
    print("\n" + "=" * 60)
    print("BENCHMARK RESULTS")
    print("=" * 60)

    first = results[0]
    print(f"Vaults: {first['vaults']}  Directories: {first['directories']}  Notes: {first['notes']}")
    print("-" * 60)
    print(f"{'Round':<8} {'Config':>10} {'Scan':>10} {'Build':>10} {'Total':>10}")

    for i, r in enumerate(results, 1):
        total = r["config_time"] + r["scan_time"] + r["build_time"]
        print(
            f"{i:<8} "
            f"{format_time(r['config_time']):>10} "
            f"{format_time(r['scan_time']):>10} "
            f"{format_time(r['build_time']):>10} "
            f"{format_time(total):>10}"
        )

    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(description="Benchmark vault scanning and index building")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to obsidian.json (default: Obsidian's config location)",
    )
    parser.add_argument(
        "--rounds",
        "-r",
        type=int,
        default=3,
        help="Number of rebuilds to time (default: 3)",
    )
    args = parser.parse_args()

    from vault_index.errors import VaultIndexError
    from vault_index.index.config import find_config_path

    config_path = args.config
    if config_path is None:
        try:
            config_path = find_config_path()
        except VaultIndexError as e:
            print(f"Error: {e}")
            sys.exit(1)

    print(f"Benchmarking {args.rounds} rebuilds for: {config_path}")
    results = [benchmark_round(config_path) for _ in range(args.rounds)]
    print_results_table(results)


if __name__ == "__main__":
    main()
