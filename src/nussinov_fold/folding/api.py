from __future__ import annotations
import logging
from typing import List, Optional, Union

from nussinov_fold.energies.pair_weights import PairWeightFn
from nussinov_fold.folding.nussinov.nussinov_recurrences import (
    NussinovFoldingConfig,
    NussinovFoldingEngine,
    RecursionPolicy,
    make_recursion,
)
from nussinov_fold.folding.nussinov.nussinov_traceback import traceback_optimal
from nussinov_fold.folding.nussinov.wuchty import DEFAULT_MAX_COUNT, SuboptimalStructure, wuchty
from nussinov_fold.structures import NussinovMatrix
from nussinov_fold.structures.nussinov_matrix import Number

logger = logging.getLogger(__name__)


def fill_matrix(
    sequence: str,
    min_loop_length: Optional[int] = None,
    policy: Union[RecursionPolicy, str] = RecursionPolicy.AMBIGUOUS,
    *,
    pair_weight: Optional[PairWeightFn] = None,
    config: Optional[NussinovFoldingConfig] = None,
) -> NussinovMatrix:
    """
    Builds and fills the matrix of `sequence` under a recursion policy.

    Parameters
    ----------
    sequence : str
        RNA sequence over {A, C, G, U}; no normalization is applied.
    min_loop_length : int, optional
        A pair `(i, j)` needs `j - i > min_loop_length`. Taken from `config`
        when omitted, or 0 without a config.
    policy : RecursionPolicy or str, optional
        `"ambiguous"`, `"unique"`, `"counting"` or `"weighted"`.
    pair_weight : PairWeightFn, optional
        Closing-pair weight for the weighted policy.
    config : NussinovFoldingConfig, optional
        Engine settings; an explicit `min_loop_length` argument overrides its own.

    Returns
    -------
    NussinovMatrix
        The filled, read-only matrix.

    Raises
    ------
    InvalidSequenceError
        If `sequence` is `None`, empty or contains symbols outside {A,C,G,U}.
    ValueError
        If `min_loop_length` is negative or `policy` is unknown.
    """
    if config is None:
        config = NussinovFoldingConfig(min_loop_length=0 if min_loop_length is None else min_loop_length)
    elif min_loop_length is not None and min_loop_length != config.min_loop_length:
        config = NussinovFoldingConfig(min_loop_length=min_loop_length, verbose=config.verbose)

    engine = NussinovFoldingEngine(recursion=make_recursion(policy, pair_weight), config=config)
    return engine.fold(sequence)


def optimal_value(matrix: NussinovMatrix) -> Number:
    """Value of the top cell `(1, n)`: pair count, structure count or partition sum."""
    return matrix.get_value(*matrix.top_cell)


def optimal_structure(matrix: NussinovMatrix) -> str:
    """
    One optimal structure in dot-bracket notation.

    Raises
    ------
    UnsupportedPolicyError
        For the counting and weighted policies, which store no traces.
    """
    return traceback_optimal(matrix).dot_bracket


def suboptimal_structures(
    matrix: NussinovMatrix,
    delta: float,
    max_count: int = DEFAULT_MAX_COUNT,
) -> List[SuboptimalStructure]:
    """
    Structures with at least `optimal - delta` base pairs (Wuchty enumeration).

    See `nussinov_fold.folding.nussinov.wuchty.wuchty`.
    """
    return wuchty(matrix, delta, max_count)
