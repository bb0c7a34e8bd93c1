"""
Tests for the PairEnergyLoader to ensure correct parsing of per-pair free
energies from YAML files, including the bundled default table.
"""
from __future__ import annotations

# --- Standard Library Imports ---
from pathlib import Path

# --- Third-Party Imports ---
import pytest

# --- Local Application Imports ---
from nussinov_fold.energies.energy_loader import PairEnergyLoader, default_pair_energies_path
from nussinov_fold.energies.energy_types import PairEnergyTable


@pytest.fixture
def write_yaml(tmp_path):
    """
    Returns a helper writing YAML text to a file under `tmp_path`.
    """
    def _write(text: str, name: str = "pairs.yaml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


def test_default_table_is_bundled():
    """
    The package ships a default table that loads without arguments.
    """
    assert default_pair_energies_path().name == "pair_energies.yaml"

    table = PairEnergyLoader().load()
    assert isinstance(table, PairEnergyTable)
    assert table.temp_k == pytest.approx(310.15)
    # Three pairs given, both orientations present.
    assert set(table.energies) == {"AU", "UA", "GC", "CG", "GU", "UG"}
    assert table.delta_g("GC") == pytest.approx(-3.0)
    assert table.delta_g("UA") == pytest.approx(-2.0)
    assert table.delta_g("UG") == pytest.approx(-1.0)


def test_dh_ds_entries_are_temperature_dependent(write_yaml):
    """
    Entries given as (ΔH, ΔS) are re-evaluated at the requested temperature.
    """
    path = write_yaml(
        "metadata:\n"
        "  temperature_c: 25\n"
        "pair_energies:\n"
        "  GC: {dh: -10.0, ds: -20.0}\n"
    )
    table = PairEnergyLoader().load(path)

    assert table.temp_k == pytest.approx(298.15)
    assert table.energies["GC"] == (-10.0, -20.0)
    # ΔG = ΔH - T * ΔS / 1000
    assert table.delta_g("GC") == pytest.approx(-10.0 + 298.15 * 0.020, abs=0.01)
    assert table.delta_g("GC", 350.0) == pytest.approx(-10.0 + 350.0 * 0.020, abs=0.01)


def test_reverse_orientation_is_mirrored_unless_given(write_yaml):
    """
    A pair given once covers both orientations; an explicit reverse entry wins.
    """
    path = write_yaml(
        "pair_energies:\n"
        "  GU: -1.5\n"
        "  UG: {dg: -0.5}\n"
        "  au: -2\n"
    )
    table = PairEnergyLoader().load(path)

    assert table.delta_g("GU") == pytest.approx(-1.5)
    assert table.delta_g("UG") == pytest.approx(-0.5)
    assert table.delta_g("UA") == pytest.approx(-2.0)
    assert table.delta_g("GC") is None


@pytest.mark.parametrize(
    "text",
    [
        "metadata: {name: empty}\n",
        "pair_energies:\n  AG: -1.0\n",
        "pair_energies:\n  GC: {dh: -3.0}\n",
        "pair_energies:\n  GC: strong\n",
    ],
)
def test_invalid_tables_raise_value_error(write_yaml, text):
    """
    Missing sections, non-pairing keys and unresolvable entries are rejected.
    """
    path = write_yaml(text)
    with pytest.raises(ValueError):
        PairEnergyLoader().load(path)


def test_non_yaml_and_missing_files(write_yaml, tmp_path):
    """
    Only YAML files are accepted, and missing files are reported as such.
    """
    path = write_yaml("pair_energies:\n  GC: -3\n", name="pairs.txt")
    with pytest.raises(ValueError):
        PairEnergyLoader().load(path)
    with pytest.raises(FileNotFoundError):
        PairEnergyLoader().load(tmp_path / "absent.yaml")
