from typing import Optional


def normalize_base(base_raw: str) -> str:
    """
    Upper-case a nucleotide base and map T->U so RNA logic can be applied uniformly.

    Parameters
    ----------
    base_raw : str
        Raw single-character nucleotide base.

    Returns
    -------
    str
        Normalized base. Inputs that are not single characters are returned as-is.
    """
    if not isinstance(base_raw, str):
        return base_raw

    if len(base_raw) != 1:
        return base_raw

    base_norm = base_raw.upper()

    return "U" if base_norm == "T" else base_norm


def normalize_sequence(raw_sequence: Optional[str]) -> Optional[str]:
    """
    Normalize a raw sequence for folding.

    Strips surrounding whitespace, upper-cases every symbol and maps DNA `T`
    to `U`. No validation happens here; `None` is passed through so the
    validator can report it.
    """
    if raw_sequence is None:
        return None
    return "".join(normalize_base(base) for base in raw_sequence.strip())


def pair_key(base_a: str, base_b: str) -> str:
    """
    Build a two-letter base-pair key (RNA-normalized), e.g. ``"AU"`` or ``"GU"``.
    """
    return normalize_base(base_a) + normalize_base(base_b)
