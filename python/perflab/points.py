"""2-D point storage.

Point is a concrete value type with float fields. LoosePoint keeps whatever
was passed in a per-instance __dict__; it exists to be benchmarked against
Point.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __post_init__(self):
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))


class LoosePoint:
    def __init__(self, x, y):
        self.x = x
        self.y = y

    def __repr__(self):
        return f"LoosePoint(x={self.x!r}, y={self.y!r})"


def sqnorm(p):
    """Squared Euclidean norm of anything with x and y attributes."""
    return p.x ** 2 + p.y ** 2
