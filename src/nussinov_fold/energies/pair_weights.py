from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

from nussinov_fold.energies.data.thermo_math import boltzmann_factor
from nussinov_fold.energies.energy_types import PairEnergyTable
from nussinov_fold.utils.nucleotide_utils import pair_key

# Placeholder per-pair weight of the weighted recursion when no energy model is given.
DEFAULT_PAIR_FACTOR = math.e


class PairWeightFn(Protocol):
    """
    Weight of closing base pair `(i, j)` (1-based positions) in `sequence`.

    Called only for admissible pairs.
    """
    def __call__(self, sequence: str, i: int, j: int) -> float:
        ...


@dataclass(frozen=True, slots=True)
class ConstantPairWeight:
    """Every admissible pair contributes the same multiplicative factor."""
    factor: float = DEFAULT_PAIR_FACTOR

    def __post_init__(self) -> None:
        if not math.isfinite(self.factor) or self.factor < 0:
            raise ValueError(f"Pair weight factor must be finite and non-negative, got {self.factor}.")

    def __call__(self, sequence: str, i: int, j: int) -> float:
        return self.factor


@dataclass(slots=True)
class BoltzmannPairWeight:
    """
    Boltzmann factor `exp(-ΔG(T) / (R * T))` of the pair's tabulated free energy.

    Pairs missing from the table contribute a weight of 0, i.e. they are
    treated as forbidden.

    Attributes
    ----------
    energies : PairEnergyTable
        Per-pair (ΔH, ΔS) values.
    temp_k : Optional[float]
        Evaluation temperature in Kelvin; defaults to the table's temperature.
    """
    energies: PairEnergyTable
    temp_k: Optional[float] = None
    _cache: Dict[str, float] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.temp_k is None:
            self.temp_k = self.energies.temp_k
        if self.temp_k <= 0:
            raise ValueError(f"Temperature must be positive Kelvin, got {self.temp_k}.")

    def __call__(self, sequence: str, i: int, j: int) -> float:
        key = pair_key(sequence[i - 1], sequence[j - 1])
        weight = self._cache.get(key)
        if weight is None:
            dg = self.energies.delta_g(key, self.temp_k)
            weight = 0.0 if dg is None else boltzmann_factor(dg, self.temp_k)
            self._cache[key] = weight
        return weight
