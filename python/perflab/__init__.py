# =============================================================================
# perflab - Performance Analysis Walkthroughs for Python
# =============================================================================
#
# Toy kernels written several ways, plus the tools used to compare them:
#
# - Kernels: matrix product variants, loop sums, row/column reductions,
#   threaded sums, polynomial fills, 2-D points
# - Measurement: one-shot time and allocations (perflab.measure)
# - Benchmarking: repeated runs and FLOP/s sweeps (perflab.bench)
# - Profiling: cProfile reports (perflab.profiling)
# - Ceilings: peak FLOP/s and memory bandwidth (perflab.hardware)
#
# Usage:
#   import perflab
#   C = perflab.matmul(A, B, variant="local")
#   stats = perflab.Benchmark().run(lambda: perflab.matmul_naive(A, B))
#
# =============================================================================

from .errors import PerfLabError, ShapeMismatch, UnknownVariant
from .matmul import (
    VARIANTS,
    check_shapes,
    matmul,
    matmul_accumulate,
    matmul_accumulate_into,
    matmul_blocked,
    matmul_flops,
    matmul_ikj,
    matmul_local,
    matmul_naive,
    matmul_parallel,
    matmul_reference,
)
from .reductions import sum_cols, sum_loop, sum_rows, sum_unstable, sum_vectorized
from .threads import sum_nothreads, sum_threads
from .fill import fill_incremental, fill_polynomial, fill_vectorized
from .points import LoosePoint, Point, sqnorm
from .measure import Timing, allocated, elapsed, timed
from .bench import Benchmark, BenchmarkStats, flops_sweep, format_sweep, log_sizes
from .profiling import ProfileReport, profile_call
from .hardware import memory_bandwidth, peak_flops, system_info

__version__ = "0.1.0"

__all__ = [
    # Errors
    "PerfLabError",
    "ShapeMismatch",
    "UnknownVariant",
    # Matrix product
    "VARIANTS",
    "check_shapes",
    "matmul",
    "matmul_accumulate",
    "matmul_accumulate_into",
    "matmul_blocked",
    "matmul_flops",
    "matmul_ikj",
    "matmul_local",
    "matmul_naive",
    "matmul_parallel",
    "matmul_reference",
    # Sums
    "sum_cols",
    "sum_loop",
    "sum_rows",
    "sum_unstable",
    "sum_vectorized",
    "sum_nothreads",
    "sum_threads",
    # Fills and points
    "fill_incremental",
    "fill_polynomial",
    "fill_vectorized",
    "LoosePoint",
    "Point",
    "sqnorm",
    # Measurement
    "Timing",
    "allocated",
    "elapsed",
    "timed",
    "Benchmark",
    "BenchmarkStats",
    "flops_sweep",
    "format_sweep",
    "log_sizes",
    "ProfileReport",
    "profile_call",
    "memory_bandwidth",
    "peak_flops",
    "system_info",
]
