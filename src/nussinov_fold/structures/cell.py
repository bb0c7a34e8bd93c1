from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union

from nussinov_fold.errors import MalformedTraceRecordError
from nussinov_fold.structures.pairing import Interval, Pair

__all__ = ["TraceRecord", "NussinovCell"]

Number = Union[int, float]


@dataclass(frozen=True, slots=True)
class TraceRecord:
    """
    One derivation justifying the value of a matrix cell.

    A trace record lists the sub-cells ("parents") the derivation combines and
    the base pair it forms on top of them. Records are immutable so the same
    record can be shared between a cell's trace list and any number of
    traceback or enumeration queries.

    Attributes
    ----------
    parents : Optional[Tuple[Interval, ...]]
        Ordered `(row, col)` coordinates of the sub-cells this derivation
        depends on.
    base_pairs : Optional[Tuple[Pair, ...]]
        The base pair formed by this derivation; empty if none, never more
        than one.

    Raises
    ------
    MalformedTraceRecordError
        If exactly one of `parents` / `base_pairs` is `None`, or if more than
        one base pair is supplied.
    """
    parents: Optional[Tuple[Interval, ...]] = None
    base_pairs: Optional[Tuple[Pair, ...]] = None

    def __post_init__(self) -> None:
        if (self.parents is None) != (self.base_pairs is None):
            raise MalformedTraceRecordError(
                f"Trace record needs both parents and base pairs or neither "
                f"(parents={self.parents!r}, base_pairs={self.base_pairs!r})."
            )
        if self.parents is None:
            return

        # Freeze list inputs into tuples.
        object.__setattr__(self, "parents", tuple((int(r), int(c)) for r, c in self.parents))
        object.__setattr__(
            self, "base_pairs", tuple(bp if isinstance(bp, Pair) else Pair(*bp) for bp in self.base_pairs)
        )

        if len(self.base_pairs) > 1:
            raise MalformedTraceRecordError(
                f"A trace record forms at most one base pair, got {len(self.base_pairs)}."
            )

    @classmethod
    def of(cls, parents: Sequence[Interval], base_pairs: Sequence[Pair] = ()) -> "TraceRecord":
        """Builds a record from plain sequences (the common case in recursions)."""
        return cls(parents=tuple(parents), base_pairs=tuple(base_pairs))

    @property
    def parent_cells(self) -> Tuple[Interval, ...]:
        return self.parents or ()

    @property
    def pairs(self) -> Tuple[Pair, ...]:
        return self.base_pairs or ()


@dataclass(slots=True)
class NussinovCell:
    """
    A single cell `(i, j)` of a Nussinov matrix.

    Attributes
    ----------
    i : int
        Row index.
    j : int
        Column index.
    value : Optional[Number]
        The cell's value. `None` means "not computed yet" for lazily evaluated
        policies; max-count policies start every cell at 0.
    traces : List[TraceRecord]
        All recorded derivations reaching the current value.
    """
    i: int
    j: int
    value: Optional[Number] = None
    traces: List[TraceRecord] = field(default_factory=list)

    @property
    def coords(self) -> Interval:
        return self.i, self.j

    @property
    def is_computed(self) -> bool:
        return self.value is not None
