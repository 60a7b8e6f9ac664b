"""In-place polynomial fill: x[i] = 1.1*k**2 + 2.2*k + 3.3 with k = i + 1.

fill_incremental produces the same values from running first and second
differences, trading the multiplications for two additions per element.
"""

import numpy as np


def fill_polynomial(x):
    for i in range(len(x)):
        k = i + 1
        x[i] = 1.1 * k * k + 2.2 * k + 3.3
    return x


def fill_incremental(x):
    y = 6.6  # f(1)
    z = 5.5  # f(2) - f(1)
    for i in range(len(x)):
        x[i] = y
        y += z
        z += 2.2
    return x


def fill_vectorized(x):
    k = np.arange(1, len(x) + 1, dtype=np.float64)
    x[:] = 1.1 * k * k + 2.2 * k + 3.3
    return x


FILL_VARIANTS = {
    "polynomial": fill_polynomial,
    "incremental": fill_incremental,
    "vectorized": fill_vectorized,
}
