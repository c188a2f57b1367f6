#!/usr/bin/env python3
"""
RxStore vs DispatchStore Throughput Comparison

Measures how many actions per second each engine folds for a handful of
workloads, scaling the workload until a run takes TIME_LIMIT_SECONDS.

Benchmark Categories:
- Single Path: every action updates one counter
- Deep Paths: actions spread over deeply nested, overlapping paths
- Projection Fan-out: many typed node subscribers observe the store
"""

import argparse
import gc
import time
import tracemalloc
from dataclasses import dataclass
from typing import Callable, List

from reactivex.subject import Subject
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from rxstate import (
    DispatchAction,
    Result,
    RxStore,
    create_default,
    create_reducer,
    handle_actions,
    on,
)

# Configuration
TIME_LIMIT_SECONDS = 0.5
STARTING_N = 100
SCALE_FACTOR = 1.5
FANOUT_SUBSCRIBERS = 50


@dataclass
class BenchmarkMetrics:
    """Metrics from a benchmark run."""

    engine: str
    operation: str
    max_n: int
    operation_time: float
    operations_per_second: float
    memory_peak_kb: int


def increment(amount):
    return lambda current: current.map(lambda v: v + amount).or_else(
        Result.success(amount)
    )


def deep_path(i: int) -> str:
    return ".".join(f"n{j}" for j in range(i % 8 + 1))


# ============================================================================
# Workloads
# ============================================================================


def rx_single_path(n: int) -> int:
    values = Subject()
    store = RxStore(
        create_reducer(values, lambda s, a: s.mapping_value("count", increment(a.value)))
    )
    for i in range(n):
        values.on_next(1)
    store.dispose()
    return n


def dispatch_single_path(n: int) -> int:
    store = create_default(lambda s, a: s.mapping_value("count", increment(a.payload)))
    for i in range(n):
        store.dispatch(DispatchAction("add", "count", 1))
    store.deinitialize()
    return n


def rx_deep_paths(n: int) -> int:
    values = Subject()
    store = RxStore(
        create_reducer(values, lambda s, a: s.updating_value(a.value[0], a.value[1]))
    )
    for i in range(n):
        values.on_next((deep_path(i), i))
    store.dispose()
    return n


def dispatch_deep_paths(n: int) -> int:
    reducer = handle_actions(
        on("set", lambda s, a: s.updating_value(a.full_value_path, a.payload))
    )
    store = create_default(reducer)
    for i in range(n):
        store.dispatch(DispatchAction("set", deep_path(i), i))
    store.deinitialize()
    return n


def rx_fanout(n: int) -> int:
    values = Subject()
    store = RxStore(
        create_reducer(values, lambda s, a: s.updating_value(a.value[0], a.value[1]))
    )
    for k in range(FANOUT_SUBSCRIBERS):
        store.number_at_node(f"slot.{k}").subscribe(lambda _: None)
    for i in range(n):
        values.on_next((f"slot.{i % FANOUT_SUBSCRIBERS}", i))
    store.dispose()
    return n


def dispatch_fanout(n: int) -> int:
    store = create_default(
        lambda s, a: s.updating_value(a.full_value_path, a.payload)
    )
    for k in range(FANOUT_SUBSCRIBERS):
        store.number_at_node(f"slot.{k}").subscribe(lambda _: None)
    for i in range(n):
        store.dispatch(DispatchAction("set", f"slot.{i % FANOUT_SUBSCRIBERS}", i))
    store.deinitialize()
    return n


WORKLOADS = [
    ("Single Path", rx_single_path, dispatch_single_path),
    ("Deep Paths", rx_deep_paths, dispatch_deep_paths),
    ("Projection Fan-out", rx_fanout, dispatch_fanout),
]


# ============================================================================
# Harness
# ============================================================================


def run_adaptive_benchmark(
    engine: str,
    operation: str,
    operation_func: Callable[[int], int],
    time_limit: float = TIME_LIMIT_SECONDS,
) -> BenchmarkMetrics:
    """Scale the workload until one run reaches time_limit, then measure it."""
    n = STARTING_N
    while True:
        start = time.perf_counter()
        operation_func(n)
        if time.perf_counter() - start >= time_limit:
            break
        n = int(n * SCALE_FACTOR)
        if n > 1_000_000:  # Safety limit
            break

    gc.collect()
    tracemalloc.start()
    start = time.perf_counter()
    performed = operation_func(n)
    elapsed = time.perf_counter() - start
    _, peak = tracemalloc.get_traced_memory()
    tracemalloc.stop()

    return BenchmarkMetrics(
        engine=engine,
        operation=operation,
        max_n=n,
        operation_time=elapsed,
        operations_per_second=performed / elapsed if elapsed > 0 else 0,
        memory_peak_kb=peak // 1024,
    )


class EngineComparison:
    """Compare both engines over every workload."""

    def __init__(self, quiet: bool = False):
        self.console = Console()
        self.quiet = quiet
        self.results: List[BenchmarkMetrics] = []

    def run(self) -> None:
        started = time.time()
        self.console.print(
            Panel(
                f"RxStore vs DispatchStore\n{TIME_LIMIT_SECONDS}s target per run",
                title="rxstate benchmark",
                border_style="blue",
            )
        )

        for name, rx_func, dispatch_func in WORKLOADS:
            if not self.quiet:
                self.console.print(f"[yellow]Running {name}...[/yellow]")
            self.results.append(run_adaptive_benchmark("RxStore", name, rx_func))
            self.results.append(
                run_adaptive_benchmark("DispatchStore", name, dispatch_func)
            )

        self._display_results()
        self.console.print(
            f"\n[dim]Comparison completed in {time.time() - started:.2f} seconds[/dim]"
        )

    def _display_results(self) -> None:
        table = Table(title="Throughput")
        table.add_column("Operation", style="cyan")
        table.add_column("Engine", style="white")
        table.add_column("Actions", justify="right")
        table.add_column("Actions/sec", style="green", justify="right")
        table.add_column("Peak Memory", style="yellow", justify="right")

        for r in self.results:
            table.add_row(
                r.operation,
                r.engine,
                f"{r.max_n:,}",
                f"{r.operations_per_second:,.0f}",
                f"{r.memory_peak_kb:,} KB",
            )

        self.console.print(table)


def main():
    """Main entry point for the comparison script."""
    parser = argparse.ArgumentParser(description="rxstate engine benchmark")
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output, show only final results",
    )
    args = parser.parse_args()

    EngineComparison(quiet=args.quiet).run()


if __name__ == "__main__":
    main()
