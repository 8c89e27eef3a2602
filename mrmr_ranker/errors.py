"""
Exception taxonomy for the mRMR ranker.

Every structural or ingestion problem is fatal for the run that raised it;
nothing in the library retries, truncates or falls back.
"""


class MrmrError(Exception):
    """Base class for all errors raised by the ranker."""


class FormatError(MrmrError, ValueError):
    """Malformed input text: missing header newline, bad token or column count."""

    def __init__(self, message, line=None):
        if line is not None:
            message = f"{message} at line {line}"
        super().__init__(message)
        self.line = line


class CodeOverflowError(MrmrError, OverflowError):
    """A discretized value does not fit within the configured code capacity."""

    def __init__(self, line, column, value, capacity):
        super().__init__(
            f"integer overflow detected at line {line} column {column}: "
            f"discretized value {value} exceeds code capacity {capacity}"
        )
        self.line = line
        self.column = column
        self.value = value
        self.capacity = capacity


class RepresentationError(MrmrError, ValueError):
    """An attribute's discretized range is wider than the code capacity."""

    def __init__(self, attribute, capacity):
        super().__init__(
            f"attribute '{attribute}' cannot be represented within {capacity} "
            f"buckets under current discretization; examine the attribute or "
            f"choose a coarser discretization"
        )
        self.attribute = attribute
        self.capacity = capacity


class InvalidIndexError(MrmrError, IndexError):
    """An attribute, code or matrix cell was addressed outside its valid range."""


class ConstructionError(MrmrError, ValueError):
    """Caller-supplied values or names do not match the declared dimensions."""
