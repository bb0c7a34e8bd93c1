from __future__ import annotations
import logging
from typing import Dict, Iterator, List, Optional, Protocol, Tuple, Union

import numpy as np

from nussinov_fold.errors import MalformedTraceRecordError
from nussinov_fold.rules.constraints import validate_sequence
from nussinov_fold.structures.cell import NussinovCell, TraceRecord
from nussinov_fold.structures.pairing import Interval

logger = logging.getLogger(__name__)

Number = Union[int, float]


class CellRecursion(Protocol):
    """Structural contract between a matrix and the recursion computing its cells."""
    is_lazy: bool

    def compute_value(self, matrix: "NussinovMatrix", i: int, j: int) -> Number: ...


class NussinovMatrix:
    """
    Square dynamic-programming table over an RNA sequence.

    The matrix has side `n + 1` for a sequence of length `n` and is indexed
    `0..n` on both axes, with sequence positions addressed 1-based. Only cells
    with `i <= j + 1` are in domain: `(i, i - 1)` is the empty interval and
    `(1, n)` covers the whole sequence.

    Values are memoized: a cell is computed at most once, on first access,
    by the bound recursion's `compute_value`. Max-count recursions instead
    fill cells through `update_cell`, starting from 0.

    Parameters
    ----------
    sequence : str
        RNA sequence over {A, C, G, U}.
    min_loop_length : int
        Minimum `j - i` separation required (exclusive) for a base pair.
    recursion : CellRecursion
        The recursion that owns the cell semantics.
    name : str, optional
        Table name used in diagnostics and for companion lookups.

    Raises
    ------
    InvalidSequenceError
        If the sequence is empty, `None` or uses symbols outside {A,C,G,U}.
    ValueError
        If `min_loop_length` is negative.
    """
    __slots__ = ("_sequence", "_min_loop_length", "_recursion", "_name", "_cells", "_companions", "_filled")

    def __init__(self, sequence: str, min_loop_length: int, recursion: CellRecursion, name: str = "D"):
        validate_sequence(sequence)
        if min_loop_length < 0:
            raise ValueError(f"Minimum loop length must be non-negative, got {min_loop_length}.")

        self._sequence = sequence
        self._min_loop_length = int(min_loop_length)
        self._recursion = recursion
        self._name = name
        self._companions: Dict[str, NussinovMatrix] = {}
        self._filled = False

        init_value = None if recursion.is_lazy else 0
        dim = len(sequence) + 1
        self._cells: List[List[NussinovCell]] = [
            [NussinovCell(i, j, init_value) for j in range(dim)] for i in range(dim)
        ]

    def __repr__(self) -> str:
        return (f"NussinovMatrix(name={self._name!r}, seq_len={self.seq_len}, "
                f"min_loop_length={self._min_loop_length}, recursion={type(self._recursion).__name__})")

    # ----- Properties -----
    @property
    def sequence(self) -> str:
        return self._sequence

    @property
    def seq_len(self) -> int:
        return len(self._sequence)

    @property
    def dim(self) -> int:
        """Number of rows (and columns): sequence length + 1."""
        return len(self._cells)

    @property
    def min_loop_length(self) -> int:
        return self._min_loop_length

    @property
    def recursion(self) -> CellRecursion:
        return self._recursion

    @property
    def name(self) -> str:
        return self._name

    @property
    def top_cell(self) -> Interval:
        """Coordinates of the cell covering the whole sequence."""
        return 1, self.seq_len

    @property
    def is_filled(self) -> bool:
        return self._filled

    def mark_filled(self) -> None:
        """Flags the matrix as filled; it is read-only from here on."""
        self._filled = True

    # ----- Companion tables -----
    def attach_companion(self, other: "NussinovMatrix") -> None:
        """
        Links `other` to this matrix (and back) under their table names.

        Coupled recursions (e.g. an open table and its paired table) read each
        other's cells through `companion()`.
        """
        if other.sequence != self._sequence or other.min_loop_length != self._min_loop_length:
            raise ValueError("Companion tables must share sequence and minimum loop length.")
        self._companions[other.name] = other
        other._companions[self._name] = self

    def companion(self, name: str) -> "NussinovMatrix":
        try:
            return self._companions[name]
        except KeyError:
            raise KeyError(f"No companion table {name!r} attached to table {self._name!r}.") from None

    # ----- Cell access -----
    def in_domain(self, i: int, j: int) -> bool:
        dim = self.dim
        return 0 <= i < dim and 0 <= j < dim and i <= j + 1

    def get_cell(self, i: int, j: int) -> Optional[NussinovCell]:
        """
        Retrieves the cell at `(i, j)`.

        Returns
        -------
        NussinovCell or None
            `None` when the coordinates are out of bounds or below the
            `i <= j + 1` border. Border probing is routine, so this never raises.
        """
        if not self.in_domain(i, j):
            return None
        return self._cells[i][j]

    def get_traces(self, i: int, j: int) -> Optional[List[TraceRecord]]:
        cell = self.get_cell(i, j)
        if cell is None:
            return None
        return cell.traces

    def get_value(self, i: int, j: int) -> Optional[Number]:
        """
        Retrieves the value at `(i, j)`, computing and caching it on first access.

        Returns
        -------
        int, float or None
            The cell value, or `None` for out-of-domain coordinates. `None` is
            never used for a legitimate zero value.
        """
        cell = self.get_cell(i, j)
        if cell is None:
            return None
        if cell.value is None:
            cell.value = self._recursion.compute_value(self, i, j)
        return cell.value

    def nucleotide(self, pos: int) -> Optional[str]:
        """Symbol at 1-based position `pos`, or `None` outside `1..n`."""
        if 1 <= pos <= self.seq_len:
            return self._sequence[pos - 1]
        return None

    def update_cell(self, i: int, j: int, record: TraceRecord) -> None:
        """
        Merges a candidate derivation into cell `(i, j)` under the max-count rule.

        The candidate's value is the number of base pairs it forms plus the
        values of its parent cells. A strictly larger value replaces the
        cell's traces, an equal one is appended, and a smaller one is dropped.
        Updates addressed to out-of-domain cells are ignored.

        Raises
        ------
        MalformedTraceRecordError
            If the record references a parent cell outside the domain.
        """
        cell = self.get_cell(i, j)
        if cell is None:
            return

        cand_value = len(record.pairs)
        for parent_i, parent_j in record.parent_cells:
            parent_value = self.get_value(parent_i, parent_j)
            if parent_value is None:
                raise MalformedTraceRecordError(
                    f"Trace record for cell ({i},{j}) references out-of-domain parent ({parent_i},{parent_j})."
                )
            cand_value += parent_value

        current = cell.value if cell.value is not None else 0
        if cand_value > current:
            cell.value = cand_value
            cell.traces = [record]
        elif cand_value == current:
            if cell.value is None:
                cell.value = cand_value
            cell.traces.append(record)

    def iter_cells(self) -> Iterator[Tuple[int, int]]:
        """Yields every in-domain `(i, j)` in row-major order."""
        dim = self.dim
        for i in range(dim):
            for j in range(max(0, i - 1), dim):
                yield i, j

    # ----- Diagnostics -----
    def as_dense(self) -> np.ndarray:
        """
        Dense NumPy view of all cell values.

        Returns
        -------
        np.ndarray
            A `(n + 1, n + 1)` float64 array; out-of-domain cells are `nan`.
        """
        dense = np.full((self.dim, self.dim), np.nan, dtype=np.float64)
        for i, j in self.iter_cells():
            value = self.get_value(i, j)
            if value is not None:
                dense[i, j] = float(value)
        return dense

    def to_string(self) -> str:
        """
        Renders the matrix for diagnostics.

        The header holds the minimum loop length followed by the sequence
        symbols; each following row is labelled by its sequence symbol and
        lists the values of columns `0..n`, with `-` for absent cells.
        """
        lines = [f"{self._min_loop_length}    " + "".join(f"{nt}  " for nt in self._sequence)]
        for i in range(1, self.dim):
            values = [self.get_value(i, j) for j in range(self.dim)]
            rendered = ", ".join("-" if v is None else _format_value(v) for v in values)
            lines.append(f"{self._sequence[i - 1]} {rendered}")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_string()


def _format_value(value: Number) -> str:
    if isinstance(value, float) and (not np.isfinite(value) or not value.is_integer()):
        return f"{value:.4g}"
    return str(int(value))
