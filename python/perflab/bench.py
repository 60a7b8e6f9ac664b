# =============================================================================
# perflab - Repeated Benchmarking and FLOP/s Sweeps
# =============================================================================
#
# Short-running functions are timed over many calls after a warmup, and the
# minimum is used as the estimator. A sweep runs several kernels over a range
# of problem sizes and reports work per second for each.
#
# Usage:
#   from perflab.bench import Benchmark, flops_sweep, format_sweep, log_sizes
#
#   stats = Benchmark(warmup=3, runs=10).run(lambda: matmul_local(A, B))
#   points = flops_sweep(VARIANTS, log_sizes(0.5, 2, 6), matmul_setup(),
#                        lambda n: matmul_flops(n, n, n))
#   print(format_sweep(points))
#
# =============================================================================

import gc
import logging
import math
import statistics
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
from tabulate import tabulate

from .measure import allocated

logger = logging.getLogger(__name__)

# =============================================================================
# Configuration
# =============================================================================

DEFAULT_WARMUP = 3
DEFAULT_RUNS = 10
DEFAULT_MIN_TIME = 0.1
MAX_RUNS = 100_000


@dataclass
class BenchmarkStats:
    """Timing statistics from one Benchmark.run, in milliseconds."""
    samples: int
    mean_ms: float
    std_ms: float
    min_ms: float
    max_ms: float
    median_ms: float
    allocated_bytes: Optional[int] = None
    times_ms: List[float] = field(default_factory=list, repr=False)

    def throughput(self, work: float) -> float:
        """Units of work per second, using the fastest run."""
        if self.min_ms <= 0:
            return math.inf
        return work / (self.min_ms / 1000)


class Benchmark:
    """Benchmark utility with warmup, repeated runs and statistics."""

    def __init__(self, warmup: int = DEFAULT_WARMUP, runs: int = DEFAULT_RUNS,
                 min_time: float = DEFAULT_MIN_TIME, track_allocations: bool = False):
        if warmup < 0:
            raise ValueError(f"warmup must be >= 0, got {warmup}")
        if runs < 1:
            raise ValueError(f"runs must be >= 1, got {runs}")
        self.warmup = warmup
        self.runs = runs
        self.min_time = min_time
        self.track_allocations = track_allocations

    def run(self, func: Callable[[], object]) -> BenchmarkStats:
        """Time func() until at least `runs` samples and `min_time` seconds."""
        for _ in range(self.warmup):
            func()

        gc.collect()

        times = []
        total = 0.0
        while len(times) < MAX_RUNS and (len(times) < self.runs or total < self.min_time):
            start = time.perf_counter()
            func()
            t = time.perf_counter() - start
            times.append(t * 1000)
            total += t

        nbytes = allocated(func) if self.track_allocations else None
        stats = BenchmarkStats(
            samples=len(times),
            mean_ms=statistics.mean(times),
            std_ms=statistics.stdev(times) if len(times) > 1 else 0.0,
            min_ms=min(times),
            max_ms=max(times),
            median_ms=statistics.median(times),
            allocated_bytes=nbytes,
            times_ms=times,
        )
        logger.debug("benchmark: %d samples, min %.4f ms, median %.4f ms",
                     stats.samples, stats.min_ms, stats.median_ms)
        return stats


# =============================================================================
# Sweeps
# =============================================================================

@dataclass
class SweepPoint:
    kernel: str
    size: int
    seconds: float
    flops: float


def log_sizes(lo_exp: float, hi_exp: float, count: int) -> List[int]:
    """floor(10**e) for `count` exponents evenly spaced in [lo_exp, hi_exp]."""
    if count < 1:
        raise ValueError(f"count must be >= 1, got {count}")
    sizes = np.floor(10 ** np.linspace(lo_exp, hi_exp, count)).astype(int)
    return sorted({int(s) for s in sizes})


def flops_sweep(kernels: Dict[str, Callable], sizes: Sequence[int],
                setup: Callable[[int], tuple], work: Callable[[int], float],
                bench: Optional[Benchmark] = None) -> List[SweepPoint]:
    """Benchmark every kernel at every size and record work per second.

    setup(size) builds the argument tuple shared by all kernels at that size.
    A kernel that raises is logged and recorded as NaN.
    """
    bench = bench or Benchmark()
    points = []
    for size in sizes:
        logger.info("sweep: size %d", size)
        args = setup(size)
        for name, kernel in kernels.items():
            try:
                stats = bench.run(lambda: kernel(*args))
            except Exception:
                logger.exception("sweep: kernel %s failed at size %d", name, size)
                points.append(SweepPoint(name, size, math.nan, math.nan))
                continue
            points.append(SweepPoint(name, size, stats.min_ms / 1000, stats.throughput(work(size))))
    return points


def _fmt_flops(value):
    if math.isnan(value):
        return "N/A"
    return f"{value:.3e}"


def format_sweep(points: Sequence[SweepPoint], tablefmt: str = "grid") -> str:
    """One row per size, one FLOP/s column per kernel."""
    kernels = list(dict.fromkeys(p.kernel for p in points))
    by_size: Dict[int, Dict[str, float]] = {}
    for p in points:
        by_size.setdefault(p.size, {})[p.kernel] = p.flops
    rows = []
    for size in sorted(by_size):
        row = [f"{size:,}"]
        row.extend(_fmt_flops(by_size[size].get(k, math.nan)) for k in kernels)
        rows.append(row)
    return tabulate(rows, headers=["N"] + kernels, tablefmt=tablefmt, disable_numparse=True)


# =============================================================================
# Input builders
# =============================================================================

def matmul_setup(seed: int = 0) -> Callable[[int], tuple]:
    """size -> (A, B), two random size x size matrices."""
    rng = np.random.default_rng(seed)

    def setup(n):
        return rng.standard_normal((n, n)), rng.standard_normal((n, n))
    return setup


def square_setup(seed: int = 0) -> Callable[[int], tuple]:
    """size -> (A,), one random size x size matrix."""
    rng = np.random.default_rng(seed)

    def setup(n):
        return (rng.standard_normal((n, n)),)
    return setup


def vector_setup(seed: int = 0) -> Callable[[int], tuple]:
    """size -> (a,), one random vector of length size."""
    rng = np.random.default_rng(seed)

    def setup(n):
        return (rng.standard_normal(n),)
    return setup


__all__ = [
    "Benchmark",
    "BenchmarkStats",
    "DEFAULT_MIN_TIME",
    "DEFAULT_RUNS",
    "DEFAULT_WARMUP",
    "SweepPoint",
    "flops_sweep",
    "format_sweep",
    "log_sizes",
    "matmul_setup",
    "square_setup",
    "vector_setup",
]
