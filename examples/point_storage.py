#!/usr/bin/env python3
"""
Point Storage

Squared norm of a 2-D point stored two ways:
- LoosePoint: attributes of whatever type were passed in
- Point: frozen dataclass with float coordinates

Run: python point_storage.py
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'python'))

from perflab.bench import Benchmark
from perflab.points import LoosePoint, Point, sqnorm


def main():
    bench = Benchmark(warmup=100, runs=10_000)

    print("=" * 60)
    print("sqnorm(p) = p.x**2 + p.y**2")
    print("=" * 60)

    for p in (LoosePoint(3, 5), LoosePoint(3.0, 5.0), Point(3, 5)):
        stats = bench.run(lambda: sqnorm(p))
        print(f"  {p!r:<28} -> {sqnorm(p)!r:<6} median {stats.median_ms * 1e6:>8.1f} ns")


if __name__ == "__main__":
    main()
