"""
Unit tests for nucleotide normalization helpers.

This module validates the functions that standardize user input before it
reaches the strict sequence validator: uppercasing, whitespace stripping and
mapping DNA 'T' (Thymine) to RNA 'U' (Uracil).
"""
from nussinov_fold.utils.nucleotide_utils import normalize_base, normalize_sequence, pair_key


def test_normalize_base_uppercases_and_maps_t_to_u():
    """
    Verifies the two core transformations: uppercasing and T-to-U mapping.
    """
    assert normalize_base("a") == "A"
    assert normalize_base("c") == "C"
    assert normalize_base("t") == "U"
    assert normalize_base("T") == "U"


def test_normalize_base_passes_through_non_single_chars():
    """
    Inputs that are not single-character strings are returned as-is.
    """
    assert normalize_base(5) == 5
    assert normalize_base("AU") == "AU"


def test_normalize_sequence_strips_and_normalizes():
    """
    Whole sequences are stripped, upper-cased and converted to RNA.
    """
    assert normalize_sequence("  acgt\n") == "ACGU"
    # Invalid symbols are left for the validator to report.
    assert normalize_sequence("acxn") == "ACXN"
    assert normalize_sequence(None) is None


def test_pair_key_is_rna_normalized():
    """Pair keys are built from normalized bases."""
    assert pair_key("g", "c") == "GC"
    assert pair_key("T", "G") == "UG"
