"""
Unit tests for the `NussinovMatrix` table.

These tests cover the cell domain (`i <= j + 1`), lazy value computation,
the max-count merge rule of `update_cell`, companion tables and the
diagnostic renderings.
"""
import math

import numpy as np
import pytest

from nussinov_fold.errors import InvalidSequenceError, MalformedTraceRecordError
from nussinov_fold.folding.nussinov.nussinov_recurrences import make_recursion
from nussinov_fold.structures import NussinovMatrix, Pair, TraceRecord


@pytest.fixture
def ambiguous_matrix() -> NussinovMatrix:
    """
    An unfilled max-count matrix over `GCGC` with minimum loop length 0.
    """
    return NussinovMatrix("GCGC", 0, make_recursion("ambiguous"))


@pytest.fixture
def counting_matrix() -> NussinovMatrix:
    """
    An unfilled lazily evaluated matrix over `GC`.
    """
    return NussinovMatrix("GC", 0, make_recursion("counting"), name="C")


def test_construction_allocates_square_table(ambiguous_matrix):
    """
    A sequence of length n gives a table of side n + 1 and top cell (1, n).
    """
    assert ambiguous_matrix.seq_len == 4
    assert ambiguous_matrix.dim == 5
    assert ambiguous_matrix.top_cell == (1, 4)
    assert ambiguous_matrix.is_filled is False


def test_construction_rejects_invalid_input():
    """
    Invalid sequences and negative loop lengths fail at construction time.
    """
    recursion = make_recursion("ambiguous")
    with pytest.raises(InvalidSequenceError):
        NussinovMatrix("", 0, recursion)
    with pytest.raises(InvalidSequenceError):
        NussinovMatrix("ACGT", 0, recursion)
    with pytest.raises(ValueError):
        NussinovMatrix("ACGU", -1, recursion)


def test_initial_values_depend_on_laziness(ambiguous_matrix, counting_matrix):
    """
    Max-count cells start at 0; lazy cells start uncomputed (`None`).
    """
    assert ambiguous_matrix.get_cell(1, 4).value == 0
    assert counting_matrix.get_cell(1, 2).value is None
    assert counting_matrix.get_cell(1, 2).is_computed is False


@pytest.mark.parametrize("i,j", [(-1, 2), (1, -1), (5, 4), (1, 5), (3, 1), (4, 0)])
def test_out_of_domain_lookups_return_none(ambiguous_matrix, i, j):
    """
    Coordinates outside the table or below the `i <= j + 1` border are absent.
    """
    assert ambiguous_matrix.get_cell(i, j) is None
    assert ambiguous_matrix.get_value(i, j) is None
    assert ambiguous_matrix.get_traces(i, j) is None


def test_empty_interval_cells_are_in_domain(ambiguous_matrix):
    """
    `(i, i - 1)` is the empty interval and a legitimate cell.
    """
    assert ambiguous_matrix.in_domain(2, 1)
    assert ambiguous_matrix.get_value(2, 1) == 0
    assert ambiguous_matrix.get_traces(2, 1) == []


def test_nucleotide_is_one_based(ambiguous_matrix):
    """
    Position 1 is the first symbol; positions outside 1..n are absent.
    """
    assert ambiguous_matrix.nucleotide(1) == "G"
    assert ambiguous_matrix.nucleotide(4) == "C"
    assert ambiguous_matrix.nucleotide(0) is None
    assert ambiguous_matrix.nucleotide(5) is None


def test_get_value_computes_lazily_and_caches(counting_matrix):
    """
    The first read computes the value via the recursion; later reads hit the cache.
    """
    assert counting_matrix.get_value(1, 2) == 2
    assert counting_matrix.get_cell(1, 2).is_computed
    # Dependencies were memoized on the way.
    assert counting_matrix.get_cell(1, 1).value == 1


def test_update_cell_applies_max_merge_rule(ambiguous_matrix):
    """
    Larger candidates replace the traces, ties append, smaller ones are dropped.
    """
    unpaired = TraceRecord.of([(2, 1)])
    paired = TraceRecord.of([(2, 1)], [Pair(1, 2)])

    ambiguous_matrix.update_cell(1, 2, unpaired)
    assert ambiguous_matrix.get_value(1, 2) == 0
    assert ambiguous_matrix.get_traces(1, 2) == [unpaired]

    ambiguous_matrix.update_cell(1, 2, paired)
    assert ambiguous_matrix.get_value(1, 2) == 1
    assert ambiguous_matrix.get_traces(1, 2) == [paired]

    ambiguous_matrix.update_cell(1, 2, paired)
    assert ambiguous_matrix.get_traces(1, 2) == [paired, paired]

    ambiguous_matrix.update_cell(1, 2, unpaired)
    assert ambiguous_matrix.get_value(1, 2) == 1
    assert len(ambiguous_matrix.get_traces(1, 2)) == 2


def test_update_cell_rejects_out_of_domain_parent(ambiguous_matrix):
    """
    A record pointing below the border is malformed.
    """
    with pytest.raises(MalformedTraceRecordError):
        ambiguous_matrix.update_cell(1, 2, TraceRecord.of([(3, 1)]))


def test_companion_tables_link_both_ways():
    """
    Companions are reachable by name from either side and must share the sequence.
    """
    table_q = NussinovMatrix("GCA", 0, make_recursion("counting"), name="Q")
    table_qb = NussinovMatrix("GCA", 0, make_recursion("counting"), name="Qb")
    table_q.attach_companion(table_qb)

    assert table_q.companion("Qb") is table_qb
    assert table_qb.companion("Q") is table_q
    with pytest.raises(KeyError):
        table_q.companion("missing")
    with pytest.raises(ValueError):
        table_q.attach_companion(NussinovMatrix("GCU", 0, make_recursion("counting"), name="X"))


def test_iter_cells_covers_exactly_the_domain(ambiguous_matrix):
    """
    Every yielded coordinate is in domain and none is repeated.
    """
    cells = list(ambiguous_matrix.iter_cells())
    assert len(cells) == len(set(cells))
    assert all(ambiguous_matrix.in_domain(i, j) for i, j in cells)
    dim = ambiguous_matrix.dim
    expected = sum(1 for i in range(dim) for j in range(dim) if i <= j + 1)
    assert len(cells) == expected


def test_as_dense_marks_absent_cells_with_nan(counting_matrix):
    """
    The dense view has the table's shape and NaN outside the domain.
    """
    dense = counting_matrix.as_dense()
    assert dense.shape == (3, 3)
    assert dense.dtype == np.float64
    assert math.isnan(dense[2, 0])
    assert dense[1, 2] == 2.0


def test_to_string_renders_header_and_rows():
    """
    Header: minimum loop length and symbols; rows: one per position, '-' when absent.
    """
    matrix = NussinovMatrix("GC", 0, make_recursion("ambiguous"))
    matrix.update_cell(1, 2, TraceRecord.of([(2, 1)], [Pair(1, 2)]))

    assert matrix.to_string() == "0    G  C  \nG 0, 0, 1\nC -, 0, 0\n"
    assert str(matrix) == matrix.to_string()
