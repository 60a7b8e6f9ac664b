# =============================================================================
# perflab - One-shot Measurements
# =============================================================================
#
# Time a single call, or measure how much memory it allocates.
#
# Usage:
#   from perflab.measure import elapsed, allocated, timed
#
#   seconds = elapsed(matmul_local, A, B)
#   nbytes = allocated(matmul_naive, A, B)
#   C = timed(matmul_local, A, B).result   # also logs time + memory
#
# =============================================================================

import logging
import time
import tracemalloc
from typing import Any, Callable, NamedTuple

logger = logging.getLogger(__name__)


class Timing(NamedTuple):
    result: Any
    seconds: float
    allocated_bytes: int


def elapsed(func: Callable, *args, **kwargs) -> float:
    """Wall-clock seconds taken by one call of func."""
    start = time.perf_counter()
    func(*args, **kwargs)
    return time.perf_counter() - start


def _traced_call(func, args, kwargs):
    """Run func under tracemalloc, return (result, seconds, peak bytes)."""
    was_tracing = tracemalloc.is_tracing()
    if not was_tracing:
        tracemalloc.start()
    tracemalloc.reset_peak()
    before, _ = tracemalloc.get_traced_memory()
    try:
        start = time.perf_counter()
        result = func(*args, **kwargs)
        seconds = time.perf_counter() - start
        _, peak = tracemalloc.get_traced_memory()
    finally:
        if not was_tracing:
            tracemalloc.stop()
    return result, seconds, max(peak - before, 0)


def allocated(func: Callable, *args, **kwargs) -> int:
    """Peak bytes allocated during one call of func.

    numpy registers its data buffers with tracemalloc, so array allocations
    are included. A tracemalloc session that was already running is left
    running.
    """
    _, _, nbytes = _traced_call(func, args, kwargs)
    return nbytes


def timed(func: Callable, *args, **kwargs) -> Timing:
    """Run func once, log its time and allocations, and return both with the result."""
    result, seconds, nbytes = _traced_call(func, args, kwargs)
    name = getattr(func, "__name__", repr(func))
    logger.info("%s: %.6f seconds (%d bytes allocated)", name, seconds, nbytes)
    return Timing(result, seconds, nbytes)


__all__ = ["Timing", "allocated", "elapsed", "timed"]
