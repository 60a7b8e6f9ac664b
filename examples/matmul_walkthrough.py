#!/usr/bin/env python3
"""
Matrix Multiplication Walkthrough

A typical performance workflow on C = A @ B written without linear algebra
routines:
- Version 1: simplest correct code (row/column copies per cell)
- Version 2: dot product by hand, accumulated into C
- Version 3: dot product in a local, C written once
Each version is checked against numpy, benchmarked and profiled.

Run: python matmul_walkthrough.py [--m 40 --n 20 --p 60]
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'python'))

import numpy as np

from perflab.bench import Benchmark
from perflab.matmul import matmul_accumulate, matmul_local, matmul_naive, matmul_reference
from perflab.profiling import profile_call

VERSIONS = [
    ("Version 1", matmul_naive),
    ("Version 2", matmul_accumulate),
    ("Version 3", matmul_local),
]


def print_stats(name, stats):
    alloc = f"{stats.allocated_bytes:,} B" if stats.allocated_bytes is not None else "n/a"
    print(f"  {name:<20} min {stats.min_ms:>9.3f} ms  median {stats.median_ms:>9.3f} ms  "
          f"peak alloc {alloc}")


def main():
    parser = argparse.ArgumentParser(description='Matrix multiplication walkthrough')
    parser.add_argument('--m', type=int, default=40)
    parser.add_argument('--n', type=int, default=20)
    parser.add_argument('--p', type=int, default=60)
    parser.add_argument('--profile-top', type=int, default=8)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    rng = np.random.default_rng(0)
    A = rng.random((args.m, args.n))
    B = rng.random((args.n, args.p))
    bench = Benchmark(warmup=1, runs=3, track_allocations=True)

    print("=" * 60)
    print(f"C = A @ B with A {A.shape}, B {B.shape}")
    print("=" * 60)

    print("\nBaseline (numpy.matmul):")
    print_stats("reference", bench.run(lambda: matmul_reference(A, B)))

    for title, kernel in VERSIONS:
        print(f"\n--- {title}: {kernel.__name__} ---")
        # Check first: correctness, and the first call is out of the way
        assert np.allclose(kernel(A, B), A @ B)
        print_stats(kernel.__name__, bench.run(lambda: kernel(A, B)))

        report = profile_call(kernel, A, B)
        print(f"\n  Top {args.profile_top} by internal time:")
        for entry in report.top(args.profile_top, sort="tottime"):
            print(f"    {entry.function:<40} {entry.ncalls:>8} calls  {entry.tottime:>8.4f} s")


if __name__ == "__main__":
    main()
