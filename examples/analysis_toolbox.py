#!/usr/bin/env python3
"""
Analysis Toolbox

The measurement tools available before optimizing anything:
- Logging inside long loops
- One-shot timing and allocation measurement
- Repeated benchmarking
- Profiling

Run: python analysis_toolbox.py
"""

import logging
import os
import sys
import time

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'python'))

import numpy as np

from perflab.bench import Benchmark
from perflab.measure import allocated, elapsed, timed
from perflab.profiling import profile_call

logger = logging.getLogger("analysis_toolbox")


def exp_random(n):
    return np.exp(np.random.rand(n, n))


def demo_logging():
    print("\n=== Tracking loops ===")
    for i in range(1, 11):
        if i % 2 == 0:
            logger.info("Even integer i=%d i//2=%d", i, i // 2)
        else:
            logger.warning("Odd integer i=%d i//2=%d", i, i // 2)
        time.sleep(0.02)


def demo_one_shot():
    print("\n=== Benchmarking (one time) ===")
    print(f"  elapsed:   {elapsed(exp_random, 100):.6f} s")
    print(f"  allocated: {allocated(exp_random, 100):,} bytes")
    timing = timed(exp_random, 100)
    print(f"  timed:     result shape {timing.result.shape}")


def demo_repeated():
    print("\n=== Benchmarking (several times) ===")
    stats = Benchmark(warmup=3, runs=20, track_allocations=True).run(lambda: exp_random(100))
    print(f"  samples: {stats.samples}")
    print(f"  min / median / mean / max: {stats.min_ms:.4f} / {stats.median_ms:.4f} / "
          f"{stats.mean_ms:.4f} / {stats.max_ms:.4f} ms")
    print(f"  std: {stats.std_ms:.4f} ms, peak alloc: {stats.allocated_bytes:,} bytes")


def demo_profiling():
    print("\n=== Profiling ===")
    report = profile_call(exp_random, 500)
    print(report.format(10))


def main():
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')
    demo_logging()
    demo_one_shot()
    demo_repeated()
    demo_profiling()


if __name__ == "__main__":
    main()
