#!/usr/bin/env python3
"""
Memory Layout and Threads

Kernels whose speed depends on how they walk memory rather than on how much
arithmetic they do:
- Loop sums vs numpy's vectorized reduction, against machine ceilings
- Row-order vs column-order traversal of a matrix
- Chunked multi-threaded sums, memory-bound vs compute-bound
- Polynomial fill, direct vs incremental

Run: python memory_and_threads.py
"""

import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'python'))

import numpy as np

from perflab.bench import Benchmark, flops_sweep, format_sweep, log_sizes, square_setup, vector_setup
from perflab.fill import FILL_VARIANTS
from perflab.hardware import memory_bandwidth, peak_flops
from perflab.reductions import REDUCTION_VARIANTS, SUM_VARIANTS
from perflab.threads import THREAD_VARIANTS


def section(title):
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def main():
    logging.basicConfig(level=logging.WARNING)
    bench = Benchmark(warmup=1, runs=3, min_time=0.05)

    section("Ceilings")
    print(f"  peak FLOP/s (numpy.matmul): {peak_flops():.3e}")
    bw = memory_bandwidth()
    print(f"  copy bandwidth:             {bw:.3e} B/s  (~{bw / 8:.3e} float64/s)")

    section("Array sum (FLOP/s)")
    print(format_sweep(flops_sweep(SUM_VARIANTS, log_sizes(1, 5, 5), vector_setup(), lambda n: n, bench)))

    section("Row vs column total (FLOP/s)")
    print(format_sweep(flops_sweep(REDUCTION_VARIANTS, log_sizes(1, 2.5, 4), square_setup(),
                                   lambda n: n * n, bench)))

    section("Threaded sums (elements/s)")
    print(format_sweep(flops_sweep(THREAD_VARIANTS, log_sizes(4, 7, 4), vector_setup(), lambda n: n, bench)))

    section("Polynomial fill (elements/s)")
    print(format_sweep(flops_sweep(FILL_VARIANTS, log_sizes(2, 5, 4), lambda n: (np.empty(n),),
                                   lambda n: n, bench)))


if __name__ == "__main__":
    main()
