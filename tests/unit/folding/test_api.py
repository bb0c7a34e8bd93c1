"""
Unit tests for the public folding API.
"""
import pytest

import nussinov_fold
from nussinov_fold import (
    InvalidSequenceError,
    NussinovFoldError,
    RecursionPolicy,
    UnsupportedPolicyError,
    fill_matrix,
    optimal_structure,
    optimal_value,
    suboptimal_structures,
)
from nussinov_fold.energies.pair_weights import ConstantPairWeight
from nussinov_fold.folding.nussinov.nussinov_recurrences import NussinovFoldingConfig


def test_package_exports_public_api():
    """The top-level package exposes the folding entry points."""
    for name in ("fill_matrix", "optimal_value", "optimal_structure", "suboptimal_structures",
                 "NussinovMatrix", "RecursionPolicy", "are_complementary"):
        assert hasattr(nussinov_fold, name)
    assert issubclass(UnsupportedPolicyError, NussinovFoldError)


@pytest.mark.parametrize("policy", ["unique", RecursionPolicy.UNIQUE, "UNIQUE"])
def test_fill_matrix_accepts_policy_names_and_members(policy):
    matrix = fill_matrix("GCGC", 0, policy)
    assert matrix.is_filled
    assert matrix.recursion.policy is RecursionPolicy.UNIQUE


def test_fill_matrix_defaults():
    """
    Defaults: ambiguous policy, no minimum loop length.
    """
    matrix = fill_matrix("GCGC")
    assert matrix.recursion.policy is RecursionPolicy.AMBIGUOUS
    assert matrix.min_loop_length == 0
    assert optimal_value(matrix) == 2


def test_fill_matrix_argument_wins_over_config_loop_length():
    """
    `min_loop_length` is taken from the argument even when a config is passed.
    """
    config = NussinovFoldingConfig(min_loop_length=5, verbose=True)
    matrix = fill_matrix("GCGC", 1, "ambiguous", config=config)
    assert matrix.min_loop_length == 1
    assert optimal_value(matrix) == 1


def test_fill_matrix_uses_config_loop_length_when_omitted():
    """
    Without a `min_loop_length` argument the config's value is used.
    """
    config = NussinovFoldingConfig(min_loop_length=3)
    matrix = fill_matrix("GGGAAAUCC", config=config)
    assert matrix.min_loop_length == 3
    assert optimal_structure(matrix) == "(((...)))"


def test_fill_matrix_rejects_bad_input():
    """Invalid sequences, negative loop lengths and unknown policies are rejected."""
    with pytest.raises(InvalidSequenceError):
        fill_matrix("")
    with pytest.raises(InvalidSequenceError):
        fill_matrix("gcgc")
    with pytest.raises(ValueError):
        fill_matrix("GCGC", -1)
    with pytest.raises(ValueError):
        fill_matrix("GCGC", 0, "mfe")


def test_optimal_value_per_policy():
    """
    The top cell holds the pair count, the structure count or the partition sum.
    """
    assert optimal_value(fill_matrix("GCGC", 0, "unique")) == 2
    assert optimal_value(fill_matrix("GCGC", 0, "counting")) == 7
    weighted = fill_matrix("GCGC", 0, "weighted", pair_weight=ConstantPairWeight(1.0))
    assert optimal_value(weighted) == pytest.approx(7.0)


def test_optimal_structure():
    assert optimal_structure(fill_matrix("GGGAAAUCC", 3)) == "(((...)))"
    with pytest.raises(UnsupportedPolicyError):
        optimal_structure(fill_matrix("GC", 0, "counting"))


def test_suboptimal_structures_delegates_to_wuchty():
    """
    Structures within one pair of the optimum, capped at `max_count`.
    """
    matrix = fill_matrix("GCGC", 0, "unique")
    found = suboptimal_structures(matrix, 1, max_count=3)
    assert len(found) == 3
    assert all(s.pair_count >= 1 for s in found)
