from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

# A closed sub-interval [i, j] of the sequence (1-based, may be empty when i = j + 1).
Interval = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class Pair:
    """
    Immutable base pair between two sequence positions.

    Parameters
    ----------
    base_i : int
        5' position (1-based).
    base_j : int
        3' position (1-based), `base_j > base_i` for any admissible pair.

    Notes
    -----
    - `span` is `j - i`, the quantity compared against the minimum loop length.
    - `loop_len` is the number of nts enclosed by the pair (`j - i - 1`).
    """
    base_i: int
    base_j: int

    @property
    def span(self) -> int:
        """Distance between the paired positions, ``j - i``."""
        return self.base_j - self.base_i

    @property
    def loop_len(self) -> int:
        """Number of nucleotides enclosed by the pair, ``j - i - 1``."""
        return self.base_j - self.base_i - 1

    def as_tuple(self) -> Tuple[int, int]:
        """
        Pair positions as a plain tuple.

        Returns
        -------
        tuple[int, int]
            The pair ``(i, j)``.
        """
        return self.base_i, self.base_j
