from __future__ import annotations
import math

# Gas constant in kcal/(K·mol).
GAS_CONSTANT_KCAL = 0.0019872036

# 0 °C in Kelvin.
ZERO_CELSIUS_K = 273.15


def delta_g(dh: float, ds: float, temp_k: float) -> float:
    """
    Compute Gibbs free energy change ΔG(T).

    Uses the thermodynamic relation:
    ``ΔG(T) = ΔH − T * (ΔS / 1000)``

    Parameters
    ----------
    dh : float
        Enthalpy change ΔH in kcal/mol.
    ds : float
        Entropy change ΔS in cal/(K·mol).
    temp_k : float
        Absolute temperature T in Kelvin.

    Returns
    -------
    float
        ΔG(T) in kcal/mol, rounded to 2 decimal places.
    """
    return round(float(dh) - float(temp_k) * (float(ds) / 1000.0), 2)


def resolve_dh_ds(*, dh: float | None, ds: float | None, dg: float | None, temp_k: float) -> tuple[float, float]:
    """
    Resolve (ΔH, ΔS) from any two of (ΔH, ΔS, ΔG(T)).

    A lone ΔG is accepted too and treated as purely enthalpic (ΔS = 0), which
    is how flat per-pair energy tables are written.

    Returns
    -------
    tuple[float, float]
        ``(ΔH [kcal/mol], ΔS [cal/(K·mol)])``, each rounded to 2 decimals.

    Raises
    ------
    ValueError
        If none of the terms is given, or only one of ΔH/ΔS without ΔG.
    """
    if dh is not None and ds is not None:
        return round(float(dh), 2), round(float(ds), 2)

    if dg is None:
        raise ValueError("Insufficient thermo terms; need dg or two of (dh, ds, dg).")

    if dh is not None:
        ds_calc = 1000.0 * (float(dh) - float(dg)) / float(temp_k)
        return round(float(dh), 2), round(ds_calc, 2)

    if ds is not None:
        dh_calc = float(dg) + float(temp_k) * (float(ds) / 1000.0)
        return round(dh_calc, 2), round(float(ds), 2)

    return round(float(dg), 2), 0.0


def boltzmann_factor(dg: float, temp_k: float) -> float:
    """
    Boltzmann weight ``exp(-ΔG / (R * T))`` of a free energy contribution.

    Parameters
    ----------
    dg : float
        Free energy in kcal/mol; negative (stabilizing) energies give weights > 1.
    temp_k : float
        Absolute temperature in Kelvin, must be positive.
    """
    if temp_k <= 0:
        raise ValueError(f"Temperature must be positive Kelvin, got {temp_k}.")
    return math.exp(-float(dg) / (GAS_CONSTANT_KCAL * float(temp_k)))


def celsius_to_kelvin(temp_c: float) -> float:
    return ZERO_CELSIUS_K + float(temp_c)
