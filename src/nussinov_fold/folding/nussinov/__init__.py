from nussinov_fold.folding.nussinov.nussinov_recurrences import (
    RecursionPolicy,
    NussinovFoldingConfig,
    NussinovFoldingEngine,
    NussinovRecursion,
    AmbiguousRecursion,
    UniqueRecursion,
    CountingRecursion,
    WeightedRecursion,
    PairedTableRecursion,
    make_recursion,
)
from nussinov_fold.folding.nussinov.nussinov_traceback import Traceback, reconstruct, traceback_optimal
from nussinov_fold.folding.nussinov.wuchty import (
    WuchtyState,
    SuboptimalStructure,
    wuchty,
    enumerate_stored_tracebacks,
)

__all__ = [
    "RecursionPolicy",
    "NussinovFoldingConfig",
    "NussinovFoldingEngine",
    "NussinovRecursion",
    "AmbiguousRecursion",
    "UniqueRecursion",
    "CountingRecursion",
    "WeightedRecursion",
    "PairedTableRecursion",
    "make_recursion",
    "Traceback",
    "reconstruct",
    "traceback_optimal",
    "WuchtyState",
    "SuboptimalStructure",
    "wuchty",
    "enumerate_stored_tracebacks",
]
