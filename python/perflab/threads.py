# =============================================================================
# perflab - Chunked Multi-threaded Summation
# =============================================================================
#
# A 1-D array is cut into contiguous chunks, each chunk is reduced on its own
# worker thread into its own slot of a partials array, and the partials are
# summed once every worker is done. numpy releases the GIL inside its
# reductions and ufuncs, so vectorized chunk kernels run concurrently.
#
# =============================================================================

import logging
import os
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .reductions import sum_vectorized

logger = logging.getLogger(__name__)


def chunk_bounds(n, nchunks):
    """Split range(n) into at most nchunks contiguous (start, stop) pairs.

    Chunks have length ceil(n / nchunks); the last one may be shorter.
    """
    if nchunks < 1:
        raise ValueError(f"nchunks must be >= 1, got {nchunks}")
    if n <= 0:
        return []
    chunk_length = -(-n // nchunks)
    return [(start, min(start + chunk_length, n)) for start in range(0, n, chunk_length)]


def transcendental_sum(a):
    """Compute-heavy chunk kernel: sum(exp(cos(sin(cos(exp(a))))))."""
    return np.add.reduce(np.exp(np.cos(np.sin(np.cos(np.exp(np.asarray(a)))))), axis=None)


def sum_threads(a, nthreads=None, sum_fun=sum_vectorized):
    a = np.asarray(a)
    if a.ndim != 1:
        a = a.ravel()
    if nthreads is None:
        nthreads = os.cpu_count() or 1
    bounds = chunk_bounds(len(a), nthreads)
    partials = np.zeros(len(bounds), dtype=np.result_type(a.dtype, np.float64))
    logger.debug("sum_threads: %d elements in %d chunks", len(a), len(bounds))

    def run(ichunk, lo, hi):
        partials[ichunk] = sum_fun(a[lo:hi])

    with ThreadPoolExecutor(max_workers=max(len(bounds), 1)) as pool:
        futures = [pool.submit(run, ichunk, lo, hi) for ichunk, (lo, hi) in enumerate(bounds)]
        for future in futures:
            future.result()
    return partials.sum()


def sum_nothreads(a):
    return sum_threads(a, 1)


def sum_threads_transcendental(a, nthreads=None):
    return sum_threads(a, nthreads, transcendental_sum)


def sum_nothreads_transcendental(a):
    return sum_threads(a, 1, transcendental_sum)


THREAD_VARIANTS = {
    "threads": sum_threads,
    "nothreads": sum_nothreads,
    "threads_transcendental": sum_threads_transcendental,
    "nothreads_transcendental": sum_nothreads_transcendental,
}

__all__ = [
    "THREAD_VARIANTS",
    "chunk_bounds",
    "sum_nothreads",
    "sum_nothreads_transcendental",
    "sum_threads",
    "sum_threads_transcendental",
    "transcendental_sum",
]
