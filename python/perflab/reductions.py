# =============================================================================
# perflab - Summation Kernels
# =============================================================================
#
# Loop sums over 1-D arrays and row-wise / column-wise reductions over 2-D
# arrays. The variants return the same value; they differ in accumulator
# type and in the order memory is visited.
#
# =============================================================================

import numpy as np

from .errors import ShapeMismatch


def sum_unstable(a):
    """Loop sum whose accumulator starts as int 0 and becomes a float later."""
    s = 0
    for i in range(len(a)):
        s += a[i]
    return s


def sum_loop(a):
    """Loop sum with the accumulator typed like the elements from the start."""
    a = np.asarray(a)
    s = a.dtype.type(0)
    for i in range(len(a)):
        s += a[i]
    return s


def sum_vectorized(a):
    return np.add.reduce(np.asarray(a), axis=None)


def _as_2d(A):
    A = np.asarray(A)
    if A.ndim != 2:
        raise ShapeMismatch(f"expected a 2-D array, got shape {A.shape}", (A.shape,))
    return A


def sum_rows(A):
    """Total of A, one row at a time (contiguous for C-ordered arrays)."""
    A = _as_2d(A)
    rows, cols = A.shape
    total_sum = 0.0
    for i in range(rows):
        partial_sum = 0.0
        for j in range(cols):
            partial_sum += A[i, j]
        total_sum += partial_sum
    return total_sum


def sum_cols(A):
    """Total of A, one column at a time (strided for C-ordered arrays)."""
    A = _as_2d(A)
    rows, cols = A.shape
    total_sum = 0.0
    for j in range(cols):
        partial_sum = 0.0
        for i in range(rows):
            partial_sum += A[i, j]
        total_sum += partial_sum
    return total_sum


SUM_VARIANTS = {
    "builtin": sum,
    "unstable": sum_unstable,
    "loop": sum_loop,
    "vectorized": sum_vectorized,
}

REDUCTION_VARIANTS = {
    "rows": sum_rows,
    "cols": sum_cols,
}

__all__ = [
    "REDUCTION_VARIANTS",
    "SUM_VARIANTS",
    "sum_cols",
    "sum_loop",
    "sum_rows",
    "sum_unstable",
    "sum_vectorized",
]
