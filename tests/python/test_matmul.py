#!/usr/bin/env python3
# =============================================================================
# perflab - Matrix Product Kernel Tests
# =============================================================================
#
# Run with: pytest tests/python/test_matmul.py -v
#

import numpy as np
import pytest

from perflab import PerfLabError, ShapeMismatch, UnknownVariant
from perflab.matmul import (
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

CORE_VARIANTS = [matmul_naive, matmul_accumulate, matmul_local]
ALL_KERNELS = [matmul_naive, matmul_accumulate, matmul_local, matmul_ikj,
               matmul_blocked, matmul_reference]


# =============================================================================
# Shape Validation
# =============================================================================

class TestCheckShapes:
    """Test operand shape validation."""

    def test_returns_dimensions(self):
        """Test that (m, n, p) is returned for compatible operands."""
        assert check_shapes(np.zeros((2, 3)), np.zeros((3, 4))) == (2, 3, 4)

    def test_inner_mismatch(self):
        """Test that differing inner dimensions raise ShapeMismatch."""
        with pytest.raises(ShapeMismatch) as excinfo:
            check_shapes(np.zeros((2, 3)), np.zeros((4, 2)))
        assert excinfo.value.shapes == ((2, 3), (4, 2))

    def test_output_mismatch(self):
        """Test that a wrongly shaped output raises ShapeMismatch."""
        with pytest.raises(ShapeMismatch):
            check_shapes(np.zeros((2, 3)), np.zeros((3, 4)), np.zeros((4, 2)))

    def test_not_2d(self):
        """Test that vectors are rejected."""
        with pytest.raises(ShapeMismatch):
            check_shapes(np.zeros(3), np.zeros((3, 1)))

    def test_error_hierarchy(self):
        """Test that ShapeMismatch is both a PerfLabError and a ValueError."""
        with pytest.raises(ValueError):
            check_shapes(np.zeros((1, 2)), np.zeros((3, 1)))
        assert issubclass(ShapeMismatch, PerfLabError)

    @pytest.mark.parametrize("kernel", ALL_KERNELS, ids=lambda f: f.__name__)
    def test_kernels_reject_mismatch(self, kernel):
        """Test that every kernel validates before computing."""
        with pytest.raises(ShapeMismatch):
            kernel(np.ones((2, 3)), np.ones((2, 3)))


# =============================================================================
# Correctness
# =============================================================================

class TestCorrectness:
    """Compare every variant against numpy.matmul."""

    @pytest.mark.parametrize("kernel", ALL_KERNELS, ids=lambda f: f.__name__)
    def test_against_reference(self, kernel, small_pair):
        """Test agreement with A @ B on random rectangular inputs."""
        A, B = small_pair
        C = kernel(A, B)
        assert C.shape == (5, 3)
        np.testing.assert_allclose(C, A @ B, rtol=1e-9, atol=1e-12)

    @pytest.mark.parametrize("kernel", CORE_VARIANTS, ids=lambda f: f.__name__)
    def test_two_by_two_exact(self, kernel, two_by_two):
        """Test the worked 2x2 example gives exactly [[19, 22], [43, 50]]."""
        A, B, expected = two_by_two
        assert np.array_equal(kernel(A, B), expected)

    @pytest.mark.parametrize("kernel", CORE_VARIANTS, ids=lambda f: f.__name__)
    def test_integer_inputs(self, kernel):
        """Test integer matrices and nested lists are accepted."""
        C = kernel([[1, 2], [3, 4]], [[5, 6], [7, 8]])
        assert C.dtype == np.float64
        assert C.tolist() == [[19.0, 22.0], [43.0, 50.0]]

    @pytest.mark.parametrize("kernel", ALL_KERNELS + [matmul_parallel],
                             ids=lambda f: f.__name__)
    def test_narrow_integers_do_not_wrap(self, kernel):
        """Test that uint8 products are formed in float64, not uint8."""
        A = np.array([[200, 100], [1, 255]], dtype=np.uint8)
        C = kernel(A, A)
        assert C.dtype == np.float64
        assert C.tolist() == [[40100.0, 45500.0], [455.0, 65125.0]]
        np.testing.assert_array_equal(C, matmul_reference(A, A))

    @pytest.mark.parametrize("kernel", ALL_KERNELS, ids=lambda f: f.__name__)
    def test_large_integers_match_reference(self, kernel):
        """Test int64 entries whose products overflow int64."""
        A = np.array([[2 ** 40, 3], [1, 2 ** 40]], dtype=np.int64)
        B = np.array([[2 ** 40, 0], [5, 2 ** 41]], dtype=np.int64)
        C = kernel(A, B)
        np.testing.assert_allclose(C, matmul_reference(A, B), rtol=1e-15)
        assert C[0, 0] == pytest.approx(2.0 ** 80)

    @pytest.mark.parametrize("kernel", ALL_KERNELS, ids=lambda f: f.__name__)
    def test_identity(self, kernel, rng):
        """Test that A @ I == A."""
        A = rng.standard_normal((4, 6))
        np.testing.assert_allclose(kernel(A, np.eye(6)), A, rtol=1e-12)

    @pytest.mark.parametrize("kernel", ALL_KERNELS, ids=lambda f: f.__name__)
    def test_zero(self, kernel, rng):
        """Test that A @ 0 is an all-zero (m, p) matrix."""
        A = rng.standard_normal((4, 6))
        C = kernel(A, np.zeros((6, 2)))
        assert C.shape == (4, 2)
        assert not C.any()

    def test_variants_agree(self, rng):
        """Test that the three core variants agree with each other."""
        A = rng.standard_normal((8, 9))
        B = rng.standard_normal((9, 10))
        C1, C2, C3 = (kernel(A, B) for kernel in CORE_VARIANTS)
        np.testing.assert_allclose(C1, C2, rtol=1e-12)
        np.testing.assert_allclose(C2, C3, rtol=1e-12)

    def test_inputs_not_mutated(self, small_pair):
        """Test that A and B are read-only for every kernel."""
        A, B = small_pair
        A0, B0 = A.copy(), B.copy()
        for kernel in ALL_KERNELS:
            kernel(A, B)
        assert np.array_equal(A, A0)
        assert np.array_equal(B, B0)

    def test_one_by_one(self):
        """Test the smallest possible product."""
        assert matmul_local([[3.0]], [[4.0]]).tolist() == [[12.0]]

    def test_empty_inner_dimension(self):
        """Test that n == 0 yields an all-zero (m, p) result."""
        C = matmul_local(np.zeros((2, 0)), np.zeros((0, 3)))
        assert C.shape == (2, 3)
        assert not C.any()


# =============================================================================
# In-place Accumulation
# =============================================================================

class TestAccumulateInto:
    """Test the caller-owned output variant."""

    def test_zeroed_output(self, two_by_two):
        """Test that a zeroed C receives the plain product."""
        A, B, expected = two_by_two
        C = np.zeros((2, 2))
        out = matmul_accumulate_into(C, A, B)
        assert out is C
        assert np.array_equal(C, expected)

    def test_accumulates(self, two_by_two):
        """Test that existing contents of C are added to."""
        A, B, expected = two_by_two
        C = np.ones((2, 2))
        matmul_accumulate_into(C, A, B)
        assert np.array_equal(C, expected + 1)

    def test_twice_doubles(self, small_pair):
        """Test that accumulating twice gives 2 * A @ B."""
        A, B = small_pair
        C = np.zeros((5, 3))
        matmul_accumulate_into(C, A, B)
        matmul_accumulate_into(C, A, B)
        np.testing.assert_allclose(C, 2 * (A @ B), rtol=1e-9)

    def test_bad_output_shape_untouched(self, two_by_two):
        """Test that a wrongly shaped C raises and is left as it was."""
        A, B, _ = two_by_two
        C = np.full((3, 2), 7.0)
        with pytest.raises(ShapeMismatch):
            matmul_accumulate_into(C, A, B)
        assert np.all(C == 7.0)

    def test_bad_operands_untouched(self):
        """Test that mismatched operands raise before C is written."""
        C = np.full((2, 2), 7.0)
        with pytest.raises(ShapeMismatch):
            matmul_accumulate_into(C, np.ones((2, 3)), np.ones((2, 2)))
        assert np.all(C == 7.0)

    def test_output_must_be_array(self, two_by_two):
        """Test that a list output is refused."""
        A, B, _ = two_by_two
        with pytest.raises(TypeError):
            matmul_accumulate_into([[0.0, 0.0], [0.0, 0.0]], A, B)

    def test_integer_output_refused(self):
        """Test that an integer C is refused before any write."""
        C = np.full((1, 1), 7, dtype=np.int64)
        with pytest.raises(TypeError):
            matmul_accumulate_into(C, [[0.5]], [[1.0]])
        assert C[0, 0] == 7

    def test_float32_output_accepted(self, two_by_two):
        """Test that a lower-precision float C still accumulates."""
        A, B, expected = two_by_two
        C = np.zeros((2, 2), dtype=np.float32)
        matmul_accumulate_into(C, A, B)
        assert C.dtype == np.float32
        np.testing.assert_array_equal(C, expected)


# =============================================================================
# Extensions
# =============================================================================

class TestBlocked:
    """Test the tiled variant."""

    @pytest.mark.parametrize("block_size", [1, 2, 3, 64])
    def test_block_sizes(self, block_size, rng):
        """Test block sizes that do and don't divide the dimensions."""
        A = rng.standard_normal((7, 5))
        B = rng.standard_normal((5, 6))
        np.testing.assert_allclose(matmul_blocked(A, B, block_size), A @ B, rtol=1e-9)

    def test_invalid_block_size(self):
        """Test that a non-positive block size raises ValueError."""
        with pytest.raises(ValueError):
            matmul_blocked(np.ones((2, 2)), np.ones((2, 2)), block_size=0)


class TestParallel:
    """Test row-partitioned multi-threaded products."""

    @pytest.mark.parametrize("workers", [1, 2, 3, 16])
    def test_workers(self, workers, rng):
        """Test any worker count, including more workers than rows."""
        A = rng.standard_normal((7, 4))
        B = rng.standard_normal((4, 5))
        np.testing.assert_allclose(matmul_parallel(A, B, workers=workers), A @ B, rtol=1e-9)

    def test_other_kernel(self, small_pair):
        """Test that the per-row kernel is configurable."""
        A, B = small_pair
        C = matmul_parallel(A, B, workers=2, kernel=matmul_reference)
        np.testing.assert_allclose(C, A @ B, rtol=1e-12)

    def test_validates_first(self):
        """Test that mismatched operands raise before threads start."""
        with pytest.raises(ShapeMismatch):
            matmul_parallel(np.ones((2, 3)), np.ones((2, 3)), workers=2)


class TestReference:
    """Test the numpy baseline."""

    def test_out(self, small_pair):
        """Test writing into a preallocated output."""
        A, B = small_pair
        out = np.empty((5, 3))
        result = matmul_reference(A, B, out=out)
        assert result is out
        np.testing.assert_allclose(out, A @ B)

    def test_bad_out(self, small_pair):
        """Test that a wrongly shaped out raises ShapeMismatch."""
        A, B = small_pair
        with pytest.raises(ShapeMismatch):
            matmul_reference(A, B, out=np.empty((3, 5)))


# =============================================================================
# Dispatch
# =============================================================================

class TestDispatch:
    """Test variant lookup by name."""

    def test_registry(self):
        """Test the registered names."""
        assert list(VARIANTS) == ["naive", "accumulate", "local", "ikj", "blocked", "reference"]

    @pytest.mark.parametrize("name", list(VARIANTS))
    def test_by_name(self, name, two_by_two):
        """Test that every registered name computes the product."""
        A, B, expected = two_by_two
        np.testing.assert_allclose(matmul(A, B, variant=name), expected)

    def test_default_is_local(self, two_by_two):
        """Test the default variant."""
        A, B, expected = two_by_two
        assert np.array_equal(matmul(A, B), expected)

    def test_unknown(self):
        """Test that an unknown name raises UnknownVariant."""
        with pytest.raises(UnknownVariant) as excinfo:
            matmul(np.ones((1, 1)), np.ones((1, 1)), variant="strassen")
        assert "strassen" in str(excinfo.value)
        assert isinstance(excinfo.value, KeyError)


def test_flop_count():
    """Test that a product costs 2*m*n*p operations."""
    assert matmul_flops(2, 3, 4) == 48
    assert matmul_flops(100, 100, 100) == 2_000_000


@pytest.mark.slow
def test_larger_square(rng):
    """Test a moderately sized square product against numpy."""
    A = rng.standard_normal((40, 40))
    B = rng.standard_normal((40, 40))
    for kernel in CORE_VARIANTS:
        np.testing.assert_allclose(kernel(A, B), A @ B, rtol=1e-9, atol=1e-10)
