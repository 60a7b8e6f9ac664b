# =============================================================================
# perflab - Machine Ceilings
# =============================================================================
#
# Rough upper bounds to put kernel FLOP/s in perspective: the rate of the
# vendor matrix product, and the rate at which a plain copy moves memory.
#
# =============================================================================

import logging
import os
import platform
import sys
import time

import numpy as np

logger = logging.getLogger(__name__)


def peak_flops(n=2000, runs=3):
    """Best FLOP/s of numpy.matmul on random n x n float64 matrices.

    numpy's BLAS runs with whatever thread count it was started with
    (OPENBLAS_NUM_THREADS, OMP_NUM_THREADS, MKL_NUM_THREADS), usually every
    core. The result is then a multi-core ceiling, above what any of the
    single-threaded loop kernels can reach. Set one of those variables to 1
    before numpy is imported for a single-core figure.
    """
    if n < 1 or runs < 1:
        raise ValueError(f"n and runs must be >= 1, got n={n}, runs={runs}")
    rng = np.random.default_rng(0)
    A = rng.standard_normal((n, n))
    B = rng.standard_normal((n, n))
    C = np.empty((n, n))
    best = float("inf")
    for _ in range(runs):
        start = time.perf_counter()
        np.matmul(A, B, out=C)
        best = min(best, time.perf_counter() - start)
    flops = 2 * n ** 3 / max(best, 1e-9)
    logger.info("peak_flops: %.3e FLOP/s (n=%d)", flops, n)
    return flops


def memory_bandwidth(n=10_000_000, runs=5):
    """Bytes per second moved by copying n float64s (read + write)."""
    if n < 1 or runs < 1:
        raise ValueError(f"n and runs must be >= 1, got n={n}, runs={runs}")
    src = np.ones(n)
    dst = np.empty_like(src)
    best = float("inf")
    for _ in range(runs):
        start = time.perf_counter()
        np.copyto(dst, src)
        best = min(best, time.perf_counter() - start)
    bandwidth = 2 * src.nbytes / max(best, 1e-9)
    logger.info("memory_bandwidth: %.3e B/s (n=%d)", bandwidth, n)
    return bandwidth


def system_info():
    """Machine description for report headers."""
    return {
        "platform": platform.platform(),
        "processor": platform.processor() or platform.machine(),
        "cpu_count": os.cpu_count(),
        "python": sys.version.split()[0],
        "numpy": np.__version__,
    }
