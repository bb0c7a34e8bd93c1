from nussinov_fold.structures.pairing import Interval, Pair
from nussinov_fold.structures.cell import NussinovCell, TraceRecord
from nussinov_fold.structures.nussinov_matrix import NussinovMatrix

__all__ = [
    "Interval",
    "Pair",
    "NussinovCell",
    "TraceRecord",
    "NussinovMatrix",
]
