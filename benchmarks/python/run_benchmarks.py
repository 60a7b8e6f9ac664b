#!/usr/bin/env python3
"""
=============================================================================
FLOP/s Sweep: perflab kernels across problem sizes
=============================================================================

Runs every variant of each selected kernel family over a range of sizes and
prints one table per family, in work units per second (higher is better):

1. matmul   - matrix product variants vs numpy.matmul (2*N^3 FLOP)
2. sum      - loop, vectorized and threaded 1-D sums (N FLOP)
3. rowcol   - row-order vs column-order totals of an N x N matrix (N^2 FLOP)
4. fill     - polynomial fill, direct vs incremental (N elements)

Usage:
    python run_benchmarks.py [--ops OPS] [--sizes SIZES] [--runs RUNS] [--warmup WARMUP]

Example:
    python run_benchmarks.py --ops matmul --sizes 8,16,32 --runs 5
    python run_benchmarks.py --ops sum,rowcol --peak

"""

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from typing import Callable, Dict, List

# Make the in-tree package importable without installing it
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '../..'))
sys.path.insert(0, os.path.join(ROOT_DIR, 'python'))

import numpy as np

from perflab.bench import (
    DEFAULT_MIN_TIME,
    DEFAULT_RUNS,
    DEFAULT_WARMUP,
    Benchmark,
    flops_sweep,
    format_sweep,
    log_sizes,
    matmul_setup,
    square_setup,
    vector_setup,
)
from perflab.fill import FILL_VARIANTS
from perflab.hardware import memory_bandwidth, peak_flops, system_info
from perflab.matmul import VARIANTS, matmul_flops
from perflab.reductions import REDUCTION_VARIANTS, SUM_VARIANTS
from perflab.threads import sum_nothreads, sum_threads

logger = logging.getLogger("run_benchmarks")

# =============================================================================
# Configuration
# =============================================================================

@dataclass
class KernelFamily:
    """A set of interchangeable kernels and how to feed and score them."""
    title: str
    kernels: Dict[str, Callable]
    setup: Callable[[int], Callable[[int], tuple]]
    work: Callable[[int], float]
    default_sizes: List[int]


def _fill_setup(seed: int) -> Callable[[int], tuple]:
    return lambda n: (np.empty(n),)


FAMILIES = {
    'matmul': KernelFamily(
        title='Matrix product (FLOP/s)',
        kernels=dict(VARIANTS),
        setup=matmul_setup,
        work=lambda n: matmul_flops(n, n, n),
        default_sizes=log_sizes(0.5, 1.5, 5),
    ),
    'sum': KernelFamily(
        title='Array sum (FLOP/s)',
        kernels={**SUM_VARIANTS, 'threads': sum_threads, 'nothreads': sum_nothreads},
        setup=vector_setup,
        work=lambda n: n,
        default_sizes=log_sizes(1, 5, 5),
    ),
    'rowcol': KernelFamily(
        title='Row vs column total (FLOP/s)',
        kernels=dict(REDUCTION_VARIANTS),
        setup=square_setup,
        work=lambda n: n * n,
        default_sizes=log_sizes(0.5, 2.5, 5),
    ),
    'fill': KernelFamily(
        title='Polynomial fill (elements/s)',
        kernels=dict(FILL_VARIANTS),
        setup=_fill_setup,
        work=lambda n: n,
        default_sizes=log_sizes(1, 5, 5),
    ),
}


def parse_sizes(text: str) -> List[int]:
    sizes = [int(s.strip()) for s in text.split(',') if s.strip()]
    if not sizes or any(s < 1 for s in sizes):
        raise argparse.ArgumentTypeError(f"sizes must be positive integers, got {text!r}")
    return sizes


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='FLOP/s sweep of perflab kernels')
    parser.add_argument('--ops', type=str, default=','.join(FAMILIES),
                        help=f"Comma-separated kernel families ({', '.join(FAMILIES)})")
    parser.add_argument('--sizes', type=parse_sizes, default=None,
                        help='Comma-separated problem sizes (default depends on family)')
    parser.add_argument('--runs', type=int, default=DEFAULT_RUNS,
                        help='Minimum number of timed runs per benchmark')
    parser.add_argument('--warmup', type=int, default=DEFAULT_WARMUP,
                        help='Number of warmup runs')
    parser.add_argument('--min-time', type=float, default=DEFAULT_MIN_TIME,
                        help='Minimum seconds spent timing each benchmark')
    parser.add_argument('--seed', type=int, default=0,
                        help='Seed for random inputs')
    parser.add_argument('--peak', action='store_true',
                        help='Also report peak FLOP/s and memory bandwidth')
    parser.add_argument('--tablefmt', type=str, default='grid',
                        help='tabulate table format')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging verbosity')
    return parser.parse_args(argv)


# =============================================================================
# Main
# =============================================================================

def run(args) -> int:
    ops = [op.strip() for op in args.ops.split(',') if op.strip()]
    unknown = [op for op in ops if op not in FAMILIES]
    if unknown:
        logger.error("Unknown kernel families: %s (expected %s)",
                     ', '.join(unknown), ', '.join(FAMILIES))
        return 1

    bench = Benchmark(warmup=args.warmup, runs=args.runs, min_time=args.min_time)

    print("=" * 80)
    print("  PERFLAB KERNEL SWEEP")
    print("=" * 80)
    info = system_info()
    print(f"\nSystem: {info['processor']}, {info['cpu_count']} CPUs, "
          f"Python {info['python']}, NumPy {info['numpy']}")
    print(f"Warmup runs: {args.warmup}, Timed runs: {args.runs}, Min time: {args.min_time}s")

    if args.peak:
        print(f"Peak FLOP/s (numpy.matmul, all BLAS threads): {peak_flops():.3e}")
        print(f"Memory bandwidth (copy):                       {memory_bandwidth():.3e} B/s")

    for op in ops:
        family = FAMILIES[op]
        sizes = args.sizes or family.default_sizes
        points = flops_sweep(family.kernels, sizes, family.setup(args.seed), family.work, bench)

        print(f"\n{'=' * 80}")
        print(f"  {family.title}")
        print(f"{'=' * 80}")
        print(format_sweep(points, tablefmt=args.tablefmt))

    print("\n" + "=" * 80)
    print("SWEEP COMPLETE")
    print("=" * 80)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    try:
        return run(args)
    except ValueError as e:
        logger.error("%s", e)
        return 1


if __name__ == '__main__':
    sys.exit(main())
