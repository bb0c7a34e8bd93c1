from __future__ import annotations

__all__ = [
    "NussinovFoldError",
    "InvalidSequenceError",
    "MalformedTraceRecordError",
    "UnsupportedPolicyError",
]


class NussinovFoldError(Exception):
    """Base class for all errors raised by the folding engine."""


class InvalidSequenceError(NussinovFoldError, ValueError):
    """
    Raised when a sequence cannot be bound to a matrix.

    The sequence is either `None`, empty, or contains symbols outside the
    RNA alphabet {A, C, G, U}.
    """


class MalformedTraceRecordError(NussinovFoldError, ValueError):
    """
    Raised when a trace record is constructed inconsistently.

    A record must either carry both `parents` and `base_pairs` or neither,
    and it may form at most one base pair.
    """


class UnsupportedPolicyError(NussinovFoldError, ValueError):
    """Raised when a query is not meaningful for the matrix's recursion policy."""
