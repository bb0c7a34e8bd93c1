from nussinov_fold.rules.constraints import (
    RNA_ALPHABET,
    are_complementary,
    is_admissible_pair,
    validate_sequence,
)

__all__ = [
    "RNA_ALPHABET",
    "are_complementary",
    "is_admissible_pair",
    "validate_sequence",
]
