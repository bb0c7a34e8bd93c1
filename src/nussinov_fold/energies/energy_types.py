from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from nussinov_fold.energies.data.thermo_math import delta_g

# A mapping from a two-letter pair key (e.g. "GC") to its (ΔH, ΔS) values.
PairEnergies = Dict[str, Tuple[float, float]]


@dataclass(frozen=True, slots=True)
class PairEnergyTable:
    """
    Per-base-pair free energy contributions for the weighted recursion.

    Energies are `(ΔH [kcal/mol], ΔS [cal/(K·mol)])` keyed by the 5'→3' pair
    key, with both orientations present (`"GC"` and `"CG"`).

    Attributes
    ----------
    energies : Mapping[str, Tuple[float, float]]
        Pair key → (ΔH, ΔS).
    temp_k : float
        Temperature (Kelvin) at which the table was specified.
    name : Optional[str]
        Free-form label from the parameter file's metadata.
    """
    energies: Mapping[str, Tuple[float, float]]
    temp_k: float = 310.15
    name: Optional[str] = None

    def delta_g(self, pair_key: str, temp_k: Optional[float] = None) -> Optional[float]:
        """
        Free energy ΔG(T) of a pair key, or `None` if the pair is not tabulated.
        """
        entry = self.energies.get(pair_key)
        if entry is None:
            return None
        dh, ds = entry
        return delta_g(dh, ds, self.temp_k if temp_k is None else temp_k)
