from __future__ import annotations
from typing import Any, Mapping, Optional

from nussinov_fold.energies.data.thermo_math import resolve_dh_ds, celsius_to_kelvin
from nussinov_fold.energies.energy_types import PairEnergies
from nussinov_fold.rules.constraints import are_complementary


# ---------- Top-level config helpers ----------

def get_temperature_kelvin(data: Mapping[str, Any]) -> float:
    """
    Return the thermodynamic temperature (Kelvin) to use for conversions.

    Parameters
    ----------
    data : Mapping[str, Any]
        Parsed YAML tree (top-level dict).

    Returns
    -------
    float
        Temperature in Kelvin.

    Notes
    -----
    Prefer metadata.temperature_kelvin, then metadata.temperature_celsius (or
    temperature_c), then the same keys at top level, else default 310.15 K.
    """
    metadata = data.get("metadata") or {}
    for source in (metadata, data):
        if source.get("temperature_kelvin") is not None:
            return float(source["temperature_kelvin"])
        for key in ("temperature_celsius", "temperature_c"):
            if source.get(key) is not None:
                return celsius_to_kelvin(source[key])

    return 310.15


def get_table_name(data: Mapping[str, Any]) -> Optional[str]:
    metadata = data.get("metadata") or {}
    name = metadata.get("name")
    return None if name is None else str(name)


# ---------- Pair energies ----------

def _optional_float(entry: Mapping[str, Any], key: str) -> float | None:
    value = entry.get(key)
    return None if value is None else float(value)


def _parse_pair_key(raw_key: Any) -> str:
    """
    Normalize a two-letter pair key and check that it is a canonical or wobble pair.
    """
    key = str(raw_key).strip().upper().replace("T", "U").replace("-", "")
    if len(key) != 2 or not are_complementary(key[0], key[1]):
        raise ValueError(f"Invalid pair key {raw_key!r}; expected one of AU, UA, GC, CG, GU, UG.")
    return key


def parse_pair_energies(data: Mapping[str, Any], temp_k: float) -> PairEnergies:
    """
    Parse the `pair_energies` section into `{pair_key: (ΔH, ΔS)}`.

    Each entry is either a bare number (ΔG at `temp_k`, in kcal/mol) or a
    mapping with any two of `dh`, `ds`, `dg` (a lone `dg` is also accepted).
    A pair given in one orientation only (e.g. `GC`) is mirrored to the other
    (`CG`); an explicit entry for the reverse orientation always wins.

    Raises
    ------
    ValueError
        If the section is missing or empty, a key is not a valid base pair,
        or an entry cannot be resolved to (ΔH, ΔS).
    """
    section = data.get("pair_energies")
    if not isinstance(section, Mapping) or not section:
        raise ValueError("YAML must contain a non-empty 'pair_energies' mapping.")

    explicit: PairEnergies = {}
    for raw_key, entry in section.items():
        key = _parse_pair_key(raw_key)
        if isinstance(entry, Mapping):
            dh_ds = resolve_dh_ds(
                dh=_optional_float(entry, "dh"),
                ds=_optional_float(entry, "ds"),
                dg=_optional_float(entry, "dg"),
                temp_k=temp_k,
            )
        elif isinstance(entry, (int, float)) and not isinstance(entry, bool):
            dh_ds = resolve_dh_ds(dh=None, ds=None, dg=float(entry), temp_k=temp_k)
        else:
            raise ValueError(f"Unsupported energy entry for pair {key}: {entry!r}")
        explicit[key] = dh_ds

    pair_energies: PairEnergies = dict(explicit)
    for key, dh_ds in explicit.items():
        pair_energies.setdefault(key[::-1], dh_ds)

    return pair_energies
