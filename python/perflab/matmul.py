# =============================================================================
# perflab - Dense Matrix Product Kernels
# =============================================================================
#
# C = A @ B written as plain loop nests, in several variants that compute the
# same product but touch memory differently:
#
#   naive       row/column copies and a temporary product per output cell
#   accumulate  C[i, j] += A[i, k] * B[k, j] straight into a zeroed C
#   local       k-sum kept in a local scalar, C[i, j] written once
#   ikj         loop order swapped so the inner loop walks rows of B and C
#   blocked     all three loops tiled into cache-sized blocks
#   reference   numpy.matmul (the vendor routine)
#
# Usage:
#   from perflab.matmul import matmul, matmul_local, matmul_accumulate_into
#
#   C = matmul_local(A, B)
#   C = matmul(A, B, variant="naive")
#   matmul_accumulate_into(C, A, B)   # C += A @ B, caller-owned C
#
# =============================================================================

import os
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from .errors import ShapeMismatch, UnknownVariant
from .threads import chunk_bounds

DEFAULT_BLOCK_SIZE = 32


def _as_matrix(M, name):
    M = np.asarray(M)
    if M.ndim != 2:
        raise ShapeMismatch(f"{name} must be 2-D, got shape {M.shape}", (M.shape,))
    return M


def check_shapes(A, B, C=None):
    """Validate operand shapes for C = A @ B and return (m, n, p).

    Raises ShapeMismatch if A or B is not 2-D, if the inner dimensions
    differ, or if C is given and is not (m, p).
    """
    A = _as_matrix(A, "A")
    B = _as_matrix(B, "B")
    m, n = A.shape
    n_b, p = B.shape
    if n != n_b:
        raise ShapeMismatch(
            f"inner dimensions differ: A is {A.shape}, B is {B.shape}",
            (A.shape, B.shape),
        )
    if C is not None and np.shape(C) != (m, p):
        raise ShapeMismatch(
            f"output has shape {np.shape(C)}, expected {(m, p)}",
            (A.shape, B.shape, np.shape(C)),
        )
    return m, n, p


def result_dtype(A, B):
    """dtype of the product: at least float64."""
    return np.result_type(np.asarray(A).dtype, np.asarray(B).dtype, np.float64)


def _operands(A, B):
    # Products are formed in the result dtype so integer inputs cannot wrap.
    A, B = np.asarray(A), np.asarray(B)
    dtype = result_dtype(A, B)
    return A.astype(dtype, copy=False), B.astype(dtype, copy=False)


def matmul_flops(m, n, p):
    """Floating point operations in an (m, n) x (n, p) product."""
    return 2 * m * n * p


# =============================================================================
# Variants
# =============================================================================

def matmul_naive(A, B):
    """Version 1: simplest correct code.

    Every output cell copies row i of A and column j of B, multiplies them
    into a third array and sums it. That is three O(n) allocations per cell.
    """
    A, B = _operands(A, B)
    m, _, p = check_shapes(A, B)
    C = np.empty((m, p), dtype=result_dtype(A, B))
    for i in range(m):
        for j in range(p):
            row = np.array(A[i, :])
            col = np.array(B[:, j])
            C[i, j] = np.sum(row * col)
    return C


def matmul_accumulate_into(C, A, B):
    """In-place accumulation: C += A @ B, one C[i, j] update per (i, j, k).

    C is caller-owned. Pass a zeroed C to get the plain product. C must be
    able to hold the product dtype (an integer C is refused), and nothing
    is written unless all checks pass.
    """
    A, B = _operands(A, B)
    if not isinstance(C, np.ndarray):
        raise TypeError(f"C must be a numpy array, got {type(C).__name__}")
    m, n, p = check_shapes(A, B, C)
    if not np.can_cast(A.dtype, C.dtype, "same_kind"):
        raise TypeError(f"C has dtype {C.dtype}, which cannot hold {A.dtype} products")
    for i in range(m):
        for j in range(p):
            for k in range(n):
                C[i, j] += A[i, k] * B[k, j]
    return C


def matmul_accumulate(A, B):
    """Version 2: dot products computed by hand, summed directly into C."""
    A, B = _operands(A, B)
    m, _, p = check_shapes(A, B)
    C = np.zeros((m, p), dtype=result_dtype(A, B))
    return matmul_accumulate_into(C, A, B)


def matmul_local(A, B):
    """Version 3: accumulate in a local, write C[i, j] exactly once."""
    A, B = _operands(A, B)
    m, n, p = check_shapes(A, B)
    C = np.empty((m, p), dtype=result_dtype(A, B))
    for i in range(m):
        for j in range(p):
            tmp = 0.0
            for k in range(n):
                tmp += A[i, k] * B[k, j]
            C[i, j] = tmp
    return C


def matmul_ikj(A, B):
    """Loop order i, k, j. B and C are both walked along rows."""
    A, B = _operands(A, B)
    m, n, p = check_shapes(A, B)
    C = np.zeros((m, p), dtype=result_dtype(A, B))
    for i in range(m):
        for k in range(n):
            a = A[i, k]
            for j in range(p):
                C[i, j] += a * B[k, j]
    return C


def matmul_blocked(A, B, block_size=DEFAULT_BLOCK_SIZE):
    """Tiled i/k/j product working on block_size x block_size tiles."""
    if block_size < 1:
        raise ValueError(f"block_size must be >= 1, got {block_size}")
    A, B = _operands(A, B)
    m, n, p = check_shapes(A, B)
    C = np.zeros((m, p), dtype=result_dtype(A, B))
    for ii in range(0, m, block_size):
        i_end = min(ii + block_size, m)
        for kk in range(0, n, block_size):
            k_end = min(kk + block_size, n)
            for jj in range(0, p, block_size):
                j_end = min(jj + block_size, p)
                for i in range(ii, i_end):
                    for k in range(kk, k_end):
                        a = A[i, k]
                        for j in range(jj, j_end):
                            C[i, j] += a * B[k, j]
    return C


def matmul_reference(A, B, out=None):
    """numpy.matmul, the trusted reference and BLAS baseline."""
    A, B = _operands(A, B)
    check_shapes(A, B, out)
    return np.matmul(A, B, out=out)


def matmul_parallel(A, B, workers=None, kernel=matmul_local):
    """Split output rows across threads, each running a serial kernel.

    Every worker owns a disjoint contiguous range of rows of C. The call
    returns once all of them have finished.
    """
    A, B = _operands(A, B)
    m, _, p = check_shapes(A, B)
    if workers is None:
        workers = os.cpu_count() or 1
    C = np.empty((m, p), dtype=result_dtype(A, B))
    bounds = chunk_bounds(m, workers)

    def run(lo, hi):
        C[lo:hi] = kernel(A[lo:hi], B)

    with ThreadPoolExecutor(max_workers=max(len(bounds), 1)) as pool:
        futures = [pool.submit(run, lo, hi) for lo, hi in bounds]
        for future in futures:
            future.result()
    return C


VARIANTS = {
    "naive": matmul_naive,
    "accumulate": matmul_accumulate,
    "local": matmul_local,
    "ikj": matmul_ikj,
    "blocked": matmul_blocked,
    "reference": matmul_reference,
}


def matmul(A, B, variant="local"):
    """Compute A @ B with the named loop variant."""
    try:
        kernel = VARIANTS[variant]
    except KeyError:
        raise UnknownVariant(variant, VARIANTS) from None
    return kernel(A, B)


__all__ = [
    "DEFAULT_BLOCK_SIZE",
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
    "result_dtype",
]
