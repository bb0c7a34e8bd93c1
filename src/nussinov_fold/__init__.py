from nussinov_fold.errors import (
    NussinovFoldError,
    InvalidSequenceError,
    MalformedTraceRecordError,
    UnsupportedPolicyError,
)
from nussinov_fold.rules import are_complementary
from nussinov_fold.structures import NussinovMatrix, Pair, TraceRecord
from nussinov_fold.folding.nussinov import RecursionPolicy, SuboptimalStructure
from nussinov_fold.folding.api import fill_matrix, optimal_value, optimal_structure, suboptimal_structures

__all__ = [
    "NussinovFoldError",
    "InvalidSequenceError",
    "MalformedTraceRecordError",
    "UnsupportedPolicyError",
    "are_complementary",
    "NussinovMatrix",
    "Pair",
    "TraceRecord",
    "RecursionPolicy",
    "SuboptimalStructure",
    "fill_matrix",
    "optimal_value",
    "optimal_structure",
    "suboptimal_structures",
]
