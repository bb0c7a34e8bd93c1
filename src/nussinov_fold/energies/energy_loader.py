from __future__ import annotations
import logging
from importlib import resources
from pathlib import Path

from nussinov_fold.energies.data.yaml_io import read_yaml
from nussinov_fold.energies.data.parsers import get_temperature_kelvin, get_table_name, parse_pair_energies
from nussinov_fold.energies.energy_types import PairEnergyTable

logger = logging.getLogger(__name__)

DEFAULT_PAIR_ENERGIES = "pair_energies.yaml"


def default_pair_energies_path() -> Path:
    """Location of the pair energy table bundled with the package."""
    return Path(str(resources.files("nussinov_fold.data").joinpath(DEFAULT_PAIR_ENERGIES)))


class PairEnergyLoader:
    """
    Loads per-base-pair free energies from a YAML file.

    The file holds a `metadata` block (name, temperature) and a
    `pair_energies` mapping. Entries are stored as `(ΔH [kcal/mol],
    ΔS [cal/(K·mol)])` so they can be re-evaluated at any temperature via
    `ΔG = ΔH - T * (ΔS / 1000)`.
    """
    def load(self, yaml_path: str | Path | None = None) -> PairEnergyTable:
        """
        Load a pair energy table.

        Parameters
        ----------
        yaml_path : str | Path | None
            Parameter file to read. When omitted, the bundled default table
            is used.

        Returns
        -------
        PairEnergyTable
            Immutable table of pair energies.

        Raises
        ------
        FileNotFoundError
            If `yaml_path` does not exist.
        ValueError
            If the file is not YAML or its `pair_energies` section is invalid.
        """
        path = default_pair_energies_path() if yaml_path is None else Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Pair energy file not found: {path}")

        data = read_yaml(path)
        temp_k = get_temperature_kelvin(data)
        energies = parse_pair_energies(data, temp_k)
        logger.debug(f"Loaded {len(energies)} pair energies from {path} at {temp_k:.2f} K")

        return PairEnergyTable(energies=energies, temp_k=temp_k, name=get_table_name(data))
