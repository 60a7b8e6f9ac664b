"""Call-level profiling on top of cProfile.

Usage:
    from perflab.profiling import profile_call

    report = profile_call(matmul_naive, A, B)
    for entry in report.top(10):
        print(entry.function, entry.cumtime)
    print(report.format(10))
"""

import cProfile
import io
import logging
import pstats
from typing import Any, Callable, List, NamedTuple

logger = logging.getLogger(__name__)

_SORT_KEYS = {
    "cumulative": lambda e: e.cumtime,
    "tottime": lambda e: e.tottime,
    "ncalls": lambda e: e.ncalls,
}


class ProfileEntry(NamedTuple):
    function: str
    filename: str
    line: int
    ncalls: int
    primitive_calls: int
    tottime: float
    cumtime: float


class ProfileReport:
    """Result of one profiled call plus its cProfile statistics."""

    def __init__(self, profiler: cProfile.Profile, result: Any):
        self.profiler = profiler
        self.result = result
        self._stats = pstats.Stats(profiler)

    def entries(self) -> List[ProfileEntry]:
        out = []
        for (filename, line, function), (cc, nc, tt, ct, _) in self._stats.stats.items():
            out.append(ProfileEntry(function, filename, line, nc, cc, tt, ct))
        return out

    def top(self, n: int = 10, sort: str = "cumulative") -> List[ProfileEntry]:
        if sort not in _SORT_KEYS:
            raise ValueError(f"sort must be one of {sorted(_SORT_KEYS)}, got {sort!r}")
        return sorted(self.entries(), key=_SORT_KEYS[sort], reverse=True)[:n]

    def calls_to(self, name: str) -> int:
        """Primitive (non-recursive) calls to functions called `name`."""
        return sum(e.primitive_calls for e in self.entries() if e.function == name)

    def format(self, n: int = 10, sort: str = "cumulative") -> str:
        buf = io.StringIO()
        pstats.Stats(self.profiler, stream=buf).sort_stats(sort).print_stats(n)
        return buf.getvalue()


def profile_call(func: Callable, *args, **kwargs) -> ProfileReport:
    """Run func(*args, **kwargs) under cProfile."""
    profiler = cProfile.Profile()
    profiler.enable()
    try:
        result = func(*args, **kwargs)
    finally:
        profiler.disable()
    logger.debug("profiled %s", getattr(func, "__name__", repr(func)))
    return ProfileReport(profiler, result)
