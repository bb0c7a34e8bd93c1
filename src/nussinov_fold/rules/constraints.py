from __future__ import annotations
from typing import Final, Optional

from nussinov_fold.errors import InvalidSequenceError

# The RNA alphabet accepted by the folding engine.
RNA_ALPHABET: Final[frozenset[str]] = frozenset("ACGU")

# Allowed canonical pairs (including wobble). Both orientations are listed so
# that the membership check is symmetric.
_RNA_ALLOWED_PAIRS: Final[frozenset[str]] = frozenset(
    {"AU", "UA", "GC", "CG", "GU", "UG"}
)


def are_complementary(base_a: Optional[str], base_b: Optional[str]) -> bool:
    """
    Return True if nucleotides `base_a` and `base_b` can form a base pair.

    Watson-Crick pairs (A-U, G-C) and the G-U wobble pair are allowed, in
    either orientation.

    Parameters
    ----------
    base_a, base_b : str or None
        Single-character nucleotides from {A, C, G, U}.

    Returns
    -------
    bool
        True if the unordered pair is one of {A,U}, {G,C}, {G,U}. Any other
        input, including symbols outside the alphabet, multi-character
        strings and `None`, yields False.
    """
    if not isinstance(base_a, str) or not isinstance(base_b, str):
        return False

    if len(base_a) != 1 or len(base_b) != 1:
        return False

    return (base_a + base_b) in _RNA_ALLOWED_PAIRS


def is_admissible_pair(base_i: int, base_j: int, min_loop_length: int) -> bool:
    """
    Check the loop-length part of pair admissibility for positions `(i, j)`.

    A pair can only close a loop if `j - i > min_loop_length`. Symbol
    complementarity is checked separately by `are_complementary`.
    """
    return base_j - base_i > min_loop_length


def validate_sequence(seq: Optional[str]) -> str:
    """
    Validate that `seq` is a non-empty string over {A, C, G, U}.

    Parameters
    ----------
    seq : str or None
        Candidate RNA sequence. No normalization is applied here; callers that
        accept lowercase input or DNA 'T' should normalize first.

    Returns
    -------
    str
        The sequence, unchanged.

    Raises
    ------
    InvalidSequenceError
        If the sequence is `None`, empty, not a string, or contains a symbol
        outside the RNA alphabet.
    """
    if seq is None:
        raise InvalidSequenceError("Sequence is missing (None).")

    if not isinstance(seq, str):
        raise InvalidSequenceError(f"Sequence must be a string, got {type(seq).__name__}.")

    if not seq:
        raise InvalidSequenceError("Sequence is empty.")

    for pos, symbol in enumerate(seq, start=1):
        if symbol not in RNA_ALPHABET:
            raise InvalidSequenceError(
                f"Invalid character at position {pos} ('{symbol}'). Only A,C,G,U are allowed."
            )

    return seq
