#!/usr/bin/env python3
"""Quick perf benchmark for KDL parsing and serialization."""

from __future__ import annotations

import argparse
import cProfile
import io
from pathlib import Path
import pstats
import statistics
import time

from tqdm import tqdm

from kdlpy.format import serialize
from kdlpy.parser import parse
from kdlpy.version import KdlVersion


def _collect_kdl_files(root: Path) -> list[Path]:
    if root.is_file():
        return [root]
    files = sorted(root.rglob("*.kdl"))
    return [path for path in files if path.is_file()]


def _run_once(
    sources: list[str],
    *,
    label: str,
    show_progress: bool,
    version: KdlVersion,
    emit: bool,
) -> tuple[float, int, int]:
    start = time.perf_counter()
    total_nodes = 0
    total_bytes = 0
    iterator = tqdm(sources, desc=label, unit="file") if show_progress else sources
    for source in iterator:
        document = parse(source, version=version)
        total_nodes += len(document)
        if emit:
            total_bytes += len(serialize(document))
    duration = time.perf_counter() - start
    return duration, total_nodes, total_bytes


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark KDL parse throughput")
    parser.add_argument("root", type=Path, help="A .kdl file or a directory searched recursively")
    parser.add_argument("--runs", type=int, default=5, help="Measured runs")
    parser.add_argument("--warmups", type=int, default=1, help="Warmup runs")
    parser.add_argument(
        "--kdl-version",
        choices=[version.value for version in KdlVersion],
        default=KdlVersion.AUTO.value,
        help="Input grammar (default: auto)",
    )
    parser.add_argument("--emit", action="store_true", help="Also serialize every parsed document")
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable tqdm progress bars (useful for pure timing)",
    )
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Run cProfile and print top hotspots",
    )
    parser.add_argument(
        "--profile-top",
        type=int,
        default=30,
        help="Number of cProfile rows to print (default: 30)",
    )
    parser.add_argument(
        "--profile-sort",
        type=str,
        default="tottime",
        help="cProfile sort key (default: tottime, common: cumulative)",
    )
    args = parser.parse_args()

    root: Path = args.root
    if not root.exists():
        raise SystemExit(f"Invalid root: {root}")

    files = _collect_kdl_files(root)
    if not files:
        raise SystemExit(f"No .kdl files found under {root}")
    sources = [path.read_text(encoding="utf-8") for path in files]
    total_chars = sum(len(source) for source in sources)

    show_progress = not args.no_progress
    version = KdlVersion(args.kdl_version)

    def _benchmark() -> tuple[list[float], int, int]:
        for warmup_idx in range(max(args.warmups, 0)):
            _run_once(
                sources,
                label=f"warmup {warmup_idx + 1}/{max(args.warmups, 0)}",
                show_progress=show_progress,
                version=version,
                emit=args.emit,
            )

        timings: list[float] = []
        nodes_count = 0
        bytes_count = 0
        for run_idx in range(max(args.runs, 1)):
            duration, nodes_count, bytes_count = _run_once(
                sources,
                label=f"run {run_idx + 1}/{max(args.runs, 1)}",
                show_progress=show_progress,
                version=version,
                emit=args.emit,
            )
            timings.append(duration)
        return timings, nodes_count, bytes_count

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        timings, nodes_count, bytes_count = _benchmark()
        profiler.disable()
        stream = io.StringIO()
        stats = pstats.Stats(profiler, stream=stream)
        stats.sort_stats(args.profile_sort).print_stats(max(args.profile_top, 1))
        print("\n[cProfile top functions]")
        print(stream.getvalue())
    else:
        timings, nodes_count, bytes_count = _benchmark()

    mean = statistics.mean(timings)

    print(f"Dataset: {root}")
    print(f"Files: {len(files)} ({total_chars} chars)")
    print(f"Top-level nodes: {nodes_count}")
    if args.emit:
        print(f"Serialized chars: {bytes_count}")
    print(f"Runs: {len(timings)} (warmups={max(args.warmups, 0)})")
    print(f"Best:   {min(timings):.4f}s")
    print(f"Median: {statistics.median(timings):.4f}s")
    print(f"Mean:   {mean:.4f}s")
    print(f"Worst:  {max(timings):.4f}s")
    print(f"Chars/s (mean): {total_chars / mean:.1f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
