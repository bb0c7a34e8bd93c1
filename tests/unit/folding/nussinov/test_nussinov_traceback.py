"""
Unit tests for the Nussinov traceback.

The traceback follows the first stored derivation of each cell, paints base
pairs into a dot-bracket list and logs every visited cell after its parents.
"""
import pytest

from nussinov_fold.errors import UnsupportedPolicyError
from nussinov_fold.folding.api import fill_matrix
from nussinov_fold.folding.common_traceback import is_balanced
from nussinov_fold.folding.nussinov.nussinov_traceback import Traceback, reconstruct, traceback_optimal
from nussinov_fold.rules import are_complementary
from nussinov_fold.structures import Pair


@pytest.mark.parametrize("policy", ["ambiguous", "unique"])
@pytest.mark.parametrize(
    "seq,expected",
    [
        ("GGGG", "...."),
        ("GC", "()"),
        ("GCGC", "(())"),
        ("A", "."),
    ],
)
def test_traceback_optimal_structures(policy, seq, expected):
    """
    The first stored derivation yields these structures for both max-count policies.
    """
    result = traceback_optimal(fill_matrix(seq, 0, policy))
    assert result.dot_bracket == expected


def test_traceback_pairs_are_sorted_and_match_dot_bracket():
    """
    The reported pairs are 1-based, sorted by 5' position and consistent with the string.
    """
    result = traceback_optimal(fill_matrix("GCGC", 0, "ambiguous"))
    assert result.pairs == [Pair(1, 4), Pair(2, 3)]
    assert result.pair_count == 2


@pytest.mark.parametrize("policy", ["ambiguous", "unique"])
def test_traceback_structure_reaches_optimum_and_is_valid(policy):
    """
    The traced structure is balanced, admissible and has the optimal pair count.
    """
    seq, min_loop = "GGGAAAUCCCAUGCAUUGCA", 3
    matrix = fill_matrix(seq, min_loop, policy)
    result = traceback_optimal(matrix)

    assert len(result.dot_bracket) == len(seq)
    assert is_balanced(result.dot_bracket)
    assert result.pair_count == matrix.get_value(*matrix.top_cell)
    for pair in result.pairs:
        assert pair.base_j - pair.base_i > min_loop
        assert are_complementary(seq[pair.base_i - 1], seq[pair.base_j - 1])


def test_visit_log_is_post_order():
    """
    Each cell is logged after its parents; cells without traces are not logged.
    """
    result = traceback_optimal(fill_matrix("GCGC", 0, "ambiguous"))
    assert result.visits == [
        ((2, 3), ((3, 2),)),
        ((1, 4), ((2, 3),)),
    ]


def test_reconstruct_stops_at_absent_cells():
    """
    Starting outside the domain or at a cell without traces leaves the accumulator untouched.
    """
    matrix = fill_matrix("GCGC", 0, "ambiguous")
    trace = reconstruct(matrix, 4, 1)
    assert trace.structure == "...."
    assert trace.visits == []

    trace = reconstruct(matrix, 3, 2)
    assert trace.visits == []


def test_reconstruct_extends_a_shared_accumulator():
    """
    Sub-intervals can be traced into one accumulator.
    """
    matrix = fill_matrix("GCGC", 0, "unique")
    trace = Traceback.for_length(matrix.seq_len)
    reconstruct(matrix, 1, 2, trace)
    reconstruct(matrix, 3, 4, trace)
    assert trace.structure == "()()"


@pytest.mark.parametrize("policy", ["counting", "weighted"])
def test_traceback_unsupported_for_lazy_policies(policy):
    """
    Counting and weighted matrices store no derivations to follow.
    """
    matrix = fill_matrix("GCGC", 0, policy)
    with pytest.raises(UnsupportedPolicyError):
        traceback_optimal(matrix)
