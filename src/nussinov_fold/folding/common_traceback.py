from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Set, Tuple

from nussinov_fold.structures import Interval, Pair

# A traceback visit: the cell reached and the parents of the derivation used there.
TraceStep = Tuple[Interval, Tuple[Interval, ...]]


@dataclass(frozen=True, slots=True)
class TraceResult:
    """
    A standard container for the results of a Nussinov traceback.

    Attributes
    ----------
    pairs : List[Pair]
        The base pairs of the structure (1-based, `i < j`), sorted by the 5'
        index `i`.
    dot_bracket : str
        The dot-bracket string representation of the structure.
    visits : List[TraceStep]
        Every `(cell, parents)` visited, in post-order (a cell is logged after
        all of its parents).
    """
    pairs: List[Pair]
    dot_bracket: str
    visits: List[TraceStep] = field(default_factory=list)

    @property
    def pair_count(self) -> int:
        return len(self.pairs)


def pairs_to_dotbracket(seq_len: int, pairs: List[Pair]) -> str:
    """
    Converts a list of 1-based base pairs into a dot-bracket string.

    Paired positions become `(` / `)` and unpaired positions `.`. Pairs that
    fall outside `1..seq_len` are ignored.

    Parameters
    ----------
    seq_len : int
        The total length of the RNA sequence.
    pairs : List[Pair]
        `Pair` objects with 1-based positions.

    Returns
    -------
    str
        The dot-bracket string of length `seq_len`.
    """
    chars = ['.'] * seq_len
    for pr in pairs:
        i, j = pr.base_i, pr.base_j
        if 1 <= i < j <= seq_len:
            chars[i - 1] = '('
            chars[j - 1] = ')'
    return ''.join(chars)


def dotbracket_to_pairs(db: str) -> Set[Tuple[int, int]]:
    """
    Parses a dot-bracket string into a set of 1-based base pairs.

    Unmatched closing brackets are ignored, as are opening brackets left on
    the stack at the end of the string. Use `is_balanced` to reject such input.
    """
    stack: List[int] = []
    out: Set[Tuple[int, int]] = set()
    for idx, ch in enumerate(db, start=1):
        if ch == '(':
            stack.append(idx)
        elif ch == ')':
            if stack:
                i = stack.pop()
                out.add((i, idx))
    return out


def is_balanced(db: str) -> bool:
    """True if every bracket is matched and only `(`, `)` and `.` are used."""
    depth = 0
    for ch in db:
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth < 0:
                return False
        elif ch != '.':
            return False
    return depth == 0
