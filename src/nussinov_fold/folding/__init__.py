from nussinov_fold.folding.common_traceback import TraceResult, pairs_to_dotbracket, dotbracket_to_pairs, is_balanced
from nussinov_fold.folding.api import fill_matrix, optimal_value, optimal_structure, suboptimal_structures

__all__ = [
    "TraceResult",
    "pairs_to_dotbracket",
    "dotbracket_to_pairs",
    "is_balanced",
    "fill_matrix",
    "optimal_value",
    "optimal_structure",
    "suboptimal_structures",
]
