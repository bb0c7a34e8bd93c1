from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import List, Optional, Tuple, Union

from nussinov_fold.errors import UnsupportedPolicyError
from nussinov_fold.folding.common_traceback import TraceResult, TraceStep
from nussinov_fold.structures import Interval, NussinovMatrix, Pair

logger = logging.getLogger(__name__)

# Stack frames: ("enter", cell) or ("exit", cell, parents).
_Frame = Union[Tuple[str, Interval], Tuple[str, Interval, Tuple[Interval, ...]]]


@dataclass(slots=True)
class Traceback:
    """
    Accumulator filled while walking the stored traces of a matrix.

    Attributes
    ----------
    dot_bracket : List[str]
        One symbol per sequence position, initialised to `.`.
    visits : List[TraceStep]
        `(cell, parents)` of every visited cell, in post-order.
    pairs : List[Pair]
        Base pairs painted so far, in visiting order.
    """
    dot_bracket: List[str]
    visits: List[TraceStep] = field(default_factory=list)
    pairs: List[Pair] = field(default_factory=list)

    @classmethod
    def for_length(cls, seq_len: int) -> "Traceback":
        return cls(dot_bracket=['.'] * seq_len)

    def paint(self, pair: Pair) -> None:
        """Marks `pair` as `(` / `)` at its 1-based positions."""
        self.dot_bracket[pair.base_i - 1] = '('
        self.dot_bracket[pair.base_j - 1] = ')'
        self.pairs.append(pair)

    def log_visit(self, cell: Interval, parents: Tuple[Interval, ...]) -> None:
        self.visits.append((cell, parents))

    @property
    def structure(self) -> str:
        return ''.join(self.dot_bracket)

    def to_result(self) -> TraceResult:
        pairs = sorted(self.pairs, key=lambda p: (p.base_i, p.base_j))
        return TraceResult(pairs=pairs, dot_bracket=self.structure, visits=list(self.visits))


def reconstruct(
    matrix: NussinovMatrix,
    i: int,
    j: int,
    accumulator: Optional[Traceback] = None,
) -> Traceback:
    """
    Follows the first stored derivation of cell `(i, j)` down to the leaves.

    At each cell the first trace record is used: its base pair (if any) is
    painted, its parents are visited depth-first in order, and then the cell
    is logged together with those parents. Cells that are out of domain or
    carry no trace records end the descent.

    The walk uses an explicit stack, so long sequences do not hit the
    interpreter's recursion limit; the visiting order is that of the plain
    recursive definition.

    Parameters
    ----------
    matrix : NussinovMatrix
        A filled matrix of a max-count policy.
    i, j : int
        The cell to start from.
    accumulator : Traceback, optional
        Accumulator to extend; a fresh one is created when omitted.

    Returns
    -------
    Traceback
        The (possibly shared) accumulator.

    Raises
    ------
    UnsupportedPolicyError
        If the matrix's recursion stores no traces.
    """
    if not matrix.recursion.supports_traceback:
        raise UnsupportedPolicyError(f"Traceback is not available for the {matrix.recursion.name} recursion.")

    trace = accumulator if accumulator is not None else Traceback.for_length(matrix.seq_len)
    stack: List[_Frame] = [("enter", (i, j))]

    while stack:
        frame = stack.pop()

        if frame[0] == "exit":
            _, cell, parents = frame
            trace.log_visit(cell, parents)
            continue

        cell = frame[1]
        traces = matrix.get_traces(*cell)
        if not traces:
            continue

        record = traces[0]
        for pair in record.pairs:
            trace.paint(pair)

        parents = record.parent_cells
        stack.append(("exit", cell, parents))
        # Reversed so that the first parent is popped (visited) first.
        for parent in reversed(parents):
            stack.append(("enter", parent))

    return trace


def traceback_optimal(matrix: NussinovMatrix) -> TraceResult:
    """
    Reconstructs one optimal structure of the whole sequence.

    Starts `reconstruct` at the top cell `(1, n)`.

    Returns
    -------
    TraceResult
        Pairs, dot-bracket string and visit log.

    Raises
    ------
    UnsupportedPolicyError
        If the matrix's recursion stores no traces.
    """
    trace = reconstruct(matrix, *matrix.top_cell)
    result = trace.to_result()
    logger.debug(f"Traceback of {matrix.name}{matrix.top_cell}: {result.dot_bracket} ({result.pair_count} pairs)")
    return result
