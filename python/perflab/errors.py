# =============================================================================
# perflab - Exceptions
# =============================================================================

class PerfLabError(Exception):
    """Base class for perflab errors."""


class ShapeMismatch(PerfLabError, ValueError):
    """Matrix operands (or a caller-supplied output) have incompatible shapes."""

    def __init__(self, message, shapes=()):
        super().__init__(message)
        self.shapes = tuple(shapes)


class UnknownVariant(PerfLabError, KeyError):
    """A kernel was requested by a name that is not registered."""

    def __init__(self, name, known):
        super().__init__(name)
        self.name = name
        self.known = tuple(known)

    def __str__(self):
        return f"unknown variant {self.name!r} (expected one of: {', '.join(self.known)})"
