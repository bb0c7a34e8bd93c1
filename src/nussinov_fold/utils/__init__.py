from nussinov_fold.utils.iter_utils import iter_spans, iter_split_points, iter_pairing_partners
from nussinov_fold.utils.nucleotide_utils import normalize_base, normalize_sequence, pair_key

__all__ = [
    "iter_spans",
    "iter_split_points",
    "iter_pairing_partners",
    "normalize_base",
    "normalize_sequence",
    "pair_key",
]
