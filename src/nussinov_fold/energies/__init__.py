from nussinov_fold.energies.energy_types import PairEnergyTable
from nussinov_fold.energies.energy_loader import PairEnergyLoader, default_pair_energies_path
from nussinov_fold.energies.pair_weights import (
    PairWeightFn,
    ConstantPairWeight,
    BoltzmannPairWeight,
    DEFAULT_PAIR_FACTOR,
)

__all__ = [
    "PairEnergyTable",
    "PairEnergyLoader",
    "default_pair_energies_path",
    "PairWeightFn",
    "ConstantPairWeight",
    "BoltzmannPairWeight",
    "DEFAULT_PAIR_FACTOR",
]
