from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Iterable, List, Tuple

from nussinov_fold.errors import UnsupportedPolicyError
from nussinov_fold.folding.common_traceback import TraceStep, pairs_to_dotbracket
from nussinov_fold.structures import Interval, NussinovMatrix, Pair

logger = logging.getLogger(__name__)

DEFAULT_MAX_COUNT = 10


@dataclass(frozen=True, slots=True)
class WuchtyState:
    """
    A partial structure of the suboptimal enumeration.

    States are immutable; each expansion builds new tuples so branches never
    share mutable data.

    Attributes
    ----------
    sigma : Tuple[Interval, ...]
        Stack of intervals still to be decomposed (the last one is next).
    pairs : Tuple[Pair, ...]
        Base pairs committed so far.
    traces : Tuple[TraceStep, ...]
        Decomposition steps taken so far, most recent first.
    """
    sigma: Tuple[Interval, ...]
    pairs: Tuple[Pair, ...] = ()
    traces: Tuple[TraceStep, ...] = ()

    @classmethod
    def build(
        cls,
        sigma: Iterable[Interval],
        pairs: Tuple[Pair, ...],
        traces: Tuple[TraceStep, ...],
        min_loop_length: int,
    ) -> "WuchtyState":
        """Creates a state, dropping intervals too short to hold a base pair."""
        open_sigma = tuple((i, j) for i, j in sigma if j - i > min_loop_length)
        return cls(sigma=open_sigma, pairs=pairs, traces=traces)

    @property
    def is_complete(self) -> bool:
        return not self.sigma


@dataclass(frozen=True, slots=True)
class SuboptimalStructure:
    """
    One structure reported by the enumeration.

    Attributes
    ----------
    structure : str
        Dot-bracket string.
    pairs : Tuple[Pair, ...]
        Base pairs in the order they were committed.
    traces : Tuple[TraceStep, ...]
        The `(cell, parents)` decomposition steps leading to the structure,
        most recent first.
    pair_count : int
        Number of base pairs.
    """
    structure: str
    pairs: Tuple[Pair, ...]
    traces: Tuple[TraceStep, ...]
    pair_count: int


def _check_limits(delta: float, max_count: int) -> None:
    if delta < 0:
        raise ValueError(f"delta must be non-negative, got {delta}.")
    if max_count < 0:
        raise ValueError(f"max_count must be non-negative, got {max_count}.")


def _check_traceable(matrix: NussinovMatrix) -> None:
    if not matrix.recursion.supports_traceback:
        raise UnsupportedPolicyError(
            f"Structure enumeration is not available for the {matrix.recursion.name} recursion."
        )


def _emit(matrix: NussinovMatrix, state: WuchtyState) -> SuboptimalStructure:
    return SuboptimalStructure(
        structure=pairs_to_dotbracket(matrix.seq_len, list(state.pairs)),
        pairs=state.pairs,
        traces=state.traces,
        pair_count=len(state.pairs),
    )


def _score(matrix: NussinovMatrix, state: WuchtyState) -> int:
    """Committed pairs plus the best achievable count of every open interval."""
    return len(state.pairs) + sum(matrix.get_value(i, j) for i, j in state.sigma)


def wuchty(matrix: NussinovMatrix, delta: float, max_count: int = DEFAULT_MAX_COUNT) -> List[SuboptimalStructure]:
    """
    Enumerates structures within `delta` base pairs of the optimum.

    Depth-first search over partial structures, seeded with the whole
    sequence `(1, n)`. The last open interval of a state is replaced by each
    of its decompositions (as produced by the recursion's `decompose`); a
    decomposition survives if the committed pairs plus the optimal values of
    the open intervals still reach `optimal - delta`. A state without open
    intervals is a finished structure.

    The output follows the depth-first order, not the pair count. With the
    ambiguous recursion the same structure may be reported more than once
    (through different derivations); the unique recursion reports each
    structure once.

    Parameters
    ----------
    matrix : NussinovMatrix
        A filled matrix of a max-count policy.
    delta : float
        Allowed distance (in base pairs) from the optimal pair count.
    max_count : int, optional
        Maximum number of structures to report, by default 10.

    Returns
    -------
    List[SuboptimalStructure]
        At most `max_count` structures, each with at least `optimal - delta` pairs.

    Raises
    ------
    ValueError
        If `delta` or `max_count` is negative.
    UnsupportedPolicyError
        If the recursion records no decompositions (counting, weighted).
    """
    _check_limits(delta, max_count)
    _check_traceable(matrix)
    if max_count == 0:
        return []

    recursion = matrix.recursion
    min_loop = matrix.min_loop_length
    optimum = matrix.get_value(*matrix.top_cell)
    threshold = optimum - delta

    found: List[SuboptimalStructure] = []
    stack: List[WuchtyState] = [WuchtyState.build((matrix.top_cell,), (), (), min_loop)]
    expansions = 0

    while stack and len(found) < max_count:
        state = stack.pop()

        if state.is_complete:
            found.append(_emit(matrix, state))
            continue

        *rest, (i, j) = state.sigma
        budget = max_count - len(found)
        queued = 0
        expansions += 1

        for record in recursion.decompose(matrix, i, j):
            if queued >= budget:
                break

            parents = record.parent_cells
            candidate = WuchtyState.build(
                tuple(rest) + parents,
                state.pairs + record.pairs,
                (((i, j), parents),) + state.traces,
                min_loop,
            )
            if _score(matrix, candidate) < threshold:
                continue

            stack.append(candidate)
            queued += 1

    logger.debug(f"Wuchty: {len(found)} structure(s) within delta={delta} of {optimum} "
                 f"after {expansions} expansion(s)")
    return found


def enumerate_stored_tracebacks(matrix: NussinovMatrix, max_count: int = DEFAULT_MAX_COUNT) -> List[SuboptimalStructure]:
    """
    Enumerates the co-optimal derivations recorded in the matrix's trace lists.

    Unlike `wuchty`, no decompositions are re-derived: every open cell is
    expanded with each of its stored trace records, and cells without records
    are leaves. All reported structures are optimal. With the ambiguous
    recursion several derivations of one structure may be reported.

    Raises
    ------
    ValueError
        If `max_count` is negative.
    UnsupportedPolicyError
        If the recursion stores no traces.
    """
    _check_limits(0, max_count)
    _check_traceable(matrix)
    if max_count == 0:
        return []

    def open_cells(cells: Iterable[Interval]) -> Tuple[Interval, ...]:
        return tuple(cell for cell in cells if matrix.get_traces(*cell))

    found: List[SuboptimalStructure] = []
    stack: List[WuchtyState] = [WuchtyState(sigma=open_cells((matrix.top_cell,)))]

    while stack and len(found) < max_count:
        state = stack.pop()

        if state.is_complete:
            found.append(_emit(matrix, state))
            continue

        *rest, cell = state.sigma
        # Reversed so that the first stored derivation is explored first.
        for record in reversed(matrix.get_traces(*cell)):
            parents = record.parent_cells
            stack.append(WuchtyState(
                sigma=tuple(rest) + open_cells(parents),
                pairs=state.pairs + record.pairs,
                traces=((cell, parents),) + state.traces,
            ))

    return found
