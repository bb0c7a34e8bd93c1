"""
Unit tests for trace records and matrix cells.

A trace record must carry both its parents and its base pairs (or neither),
and may form at most one base pair.
"""
import pytest

from nussinov_fold.errors import MalformedTraceRecordError
from nussinov_fold.structures.cell import NussinovCell, TraceRecord
from nussinov_fold.structures.pairing import Pair


def test_empty_trace_record_is_valid():
    """
    A record with neither parents nor pairs is allowed and reads as empty.
    """
    record = TraceRecord()
    assert record.parent_cells == ()
    assert record.pairs == ()


@pytest.mark.parametrize(
    "parents,base_pairs",
    [
        (((1, 2),), None),
        (None, (Pair(1, 2),)),
    ],
)
def test_trace_record_requires_both_fields_or_neither(parents, base_pairs):
    """
    Supplying exactly one of `parents` / `base_pairs` is malformed.
    """
    with pytest.raises(MalformedTraceRecordError):
        TraceRecord(parents=parents, base_pairs=base_pairs)


def test_trace_record_rejects_more_than_one_pair():
    """
    A single derivation step forms at most one base pair.
    """
    with pytest.raises(MalformedTraceRecordError):
        TraceRecord(parents=((2, 3),), base_pairs=(Pair(1, 4), Pair(2, 3)))


def test_trace_record_freezes_list_inputs():
    """
    List inputs are converted to tuples and plain tuples become `Pair` objects.
    """
    record = TraceRecord(parents=[[2, 3]], base_pairs=[(1, 4)])
    assert record.parents == ((2, 3),)
    assert record.base_pairs == (Pair(1, 4),)


def test_trace_record_of_defaults_to_no_pairs():
    """
    The `of` constructor covers the common unpaired case.
    """
    record = TraceRecord.of([(2, 4)])
    assert record.parent_cells == ((2, 4),)
    assert record.pairs == ()


def test_malformed_trace_record_error_is_value_error():
    """
    The error derives from ValueError for callers that do not import the package errors.
    """
    with pytest.raises(ValueError):
        TraceRecord(parents=(), base_pairs=None)


def test_cell_defaults():
    """
    A fresh cell has no value and no traces; traces are not shared between cells.
    """
    cell_a = NussinovCell(1, 3)
    cell_b = NussinovCell(2, 3)
    assert cell_a.coords == (1, 3)
    assert cell_a.is_computed is False
    cell_a.traces.append(TraceRecord())
    assert cell_b.traces == []
