#!/usr/bin/env python3
# =============================================================================
# perflab - Pytest Configuration
# =============================================================================

import os
import sys

import numpy as np
import pytest

# Make the in-tree package importable without installing it
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.insert(0, os.path.join(ROOT_DIR, "python"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def rng():
    """Seeded random generator so failures reproduce."""
    return np.random.default_rng(1234)


@pytest.fixture
def small_pair(rng):
    """A (5, 7) and B (7, 3) with random entries."""
    return rng.standard_normal((5, 7)), rng.standard_normal((7, 3))


@pytest.fixture
def two_by_two():
    """The worked 2x2 example and its exact product."""
    A = np.array([[1.0, 2.0], [3.0, 4.0]])
    B = np.array([[5.0, 6.0], [7.0, 8.0]])
    C = np.array([[19.0, 22.0], [43.0, 50.0]])
    return A, B, C
