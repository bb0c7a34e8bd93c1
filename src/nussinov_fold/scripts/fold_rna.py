#!/usr/bin/env python3
"""
Fold an RNA sequence with a Nussinov-family recursion from the command line.

Prints the optimal value of the chosen recursion (maximum pair count,
structure count or partition sum), one optimal structure and, on request,
the structures within `--delta` base pairs of the optimum.

Examples:
  - nussinov-fold GGGAAAUCC
  - nussinov-fold --policy unique --min-loop 3 --delta 1 --max-count 5 GGGAAAUCCCAUG
  - nussinov-fold --policy counting --json GCGCAUAU
  - nussinov-fold --policy weighted --pair-energies my_pairs.yaml --tempC 25 GGGAAACCC
"""

# --- Standard Library Imports ---
from __future__ import annotations
import argparse
import json
import logging
import sys
import time
from typing import Any, Dict, List, Optional

# --- Local Application Imports ---
from nussinov_fold.energies import BoltzmannPairWeight, PairEnergyLoader, PairWeightFn
from nussinov_fold.energies.data.thermo_math import celsius_to_kelvin
from nussinov_fold.errors import NussinovFoldError
from nussinov_fold.folding.api import fill_matrix, optimal_value, optimal_structure, suboptimal_structures
from nussinov_fold.folding.nussinov import NussinovFoldingConfig, RecursionPolicy, SuboptimalStructure
from nussinov_fold.folding.nussinov.wuchty import DEFAULT_MAX_COUNT
from nussinov_fold.rules import validate_sequence
from nussinov_fold.structures import NussinovMatrix
from nussinov_fold.utils.logging_utils import configure_package_logging, DEFAULT_LOG_DIR
from nussinov_fold.utils.nucleotide_utils import normalize_sequence

# Set up module logger
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


# --------------------------
# Logging Configuration
# --------------------------
def setup_cli_logging(verbose_level: int, log_file: Optional[str] = None) -> None:
    """
    Configures package logging from the command-line verbosity.

    Parameters
    ----------
    verbose_level : int
        The verbosity level: 0 for WARNING, 1 for INFO, 2 for DEBUG.
    log_file : Optional[str]
        The path to a specific log file. If not provided, a default timestamped
        log file is created in the `var/log/` directory when verbosity is > 0.
    """
    configure_package_logging(verbose_level, log_file)

    if verbose_level > 0 and log_file is None:
        logger.info(f"Logs will be saved to: {DEFAULT_LOG_DIR.resolve()}")


# --------------------------
# Helpers
# --------------------------
def validate_and_normalize_seq(raw_sequence: str) -> str:
    """
    Normalizes (strip, upper-case, T->U) and validates an RNA sequence.

    Raises
    ------
    InvalidSequenceError
        If the normalized sequence is empty or contains symbols outside {A,C,G,U}.
    """
    logger.debug(f"Validating sequence: {raw_sequence[:50]}{'...' if len(raw_sequence) > 50 else ''}")
    normalized_sequence = validate_sequence(normalize_sequence(raw_sequence))
    logger.info(f"Sequence validated: length={len(normalized_sequence)}")
    return normalized_sequence


def load_pair_weight(yaml_path: Optional[str], temp_c: Optional[float]) -> BoltzmannPairWeight:
    """
    Loads a pair energy table and wraps it as Boltzmann pair weights.

    Parameters
    ----------
    yaml_path : Optional[str]
        Pair energy YAML file; the bundled table is used when omitted.
    temp_c : Optional[float]
        Evaluation temperature in °C; the table's own temperature when omitted.
    """
    table = PairEnergyLoader().load(yaml_path)
    temp_k = table.temp_k if temp_c is None else celsius_to_kelvin(temp_c)
    logger.info(f"Loaded pair energies '{table.name or yaml_path or 'default'}' ({len(table.energies)} pairs)")
    logger.info(f"Temperature: {temp_k - 273.15:.2f}°C ({temp_k:.2f}K)")
    return BoltzmannPairWeight(table, temp_k)


def describe_policy(matrix: NussinovMatrix) -> Dict[str, str]:
    recursion = matrix.recursion
    return {"name": recursion.name, "description": recursion.description, "latex": recursion.latex}


def predict(
    seq: str,
    policy: RecursionPolicy,
    min_loop_length: int,
    delta: Optional[float],
    max_count: int,
    pair_weight: Optional[PairWeightFn],
) -> Dict[str, Any]:
    """
    Fills the matrix and collects the optimal value, structure and suboptimals.
    """
    logger.info("=" * 60)
    logger.info(f"Using Nussinov '{policy.value}' recursion")
    logger.info("=" * 60)
    start_time = time.perf_counter()

    config = NussinovFoldingConfig(min_loop_length=min_loop_length, verbose=logger.isEnabledFor(logging.INFO))
    matrix = fill_matrix(seq, min_loop_length, policy, pair_weight=pair_weight, config=config)

    result: Dict[str, Any] = {"matrix": matrix, "value": optimal_value(matrix), "dot_bracket": None, "suboptimal": []}
    if matrix.recursion.supports_traceback:
        result["dot_bracket"] = optimal_structure(matrix)
        if delta is not None:
            result["suboptimal"] = suboptimal_structures(matrix, delta, max_count)

    elapsed = time.perf_counter() - start_time
    logger.info(f"Prediction completed in {elapsed:.2f}s")
    return result


def _suboptimal_to_json(structures: List[SuboptimalStructure]) -> List[Dict[str, Any]]:
    return [{"dot_bracket": s.structure, "pair_count": s.pair_count} for s in structures]


# --------------------------
# Command-Line Interface
# --------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nussinov-fold",
        description="Fold RNA with Nussinov-family recursions (max pairing, counting, partition sum).",
    )
    parser.add_argument("sequence", help="RNA sequence (A,C,G,U; T will be converted to U)")
    parser.add_argument("--policy", choices=[p.value for p in RecursionPolicy], default=RecursionPolicy.AMBIGUOUS.value,
                        help="Recursion to fill the matrix with (default: ambiguous).")
    parser.add_argument("--min-loop", type=int, default=0,
                        help="Minimum loop length l; a pair (i,j) needs j-i > l (default: 0).")
    parser.add_argument("--delta", type=float, default=None,
                        help="Also list structures within DELTA base pairs of the optimum.")
    parser.add_argument("--max-count", type=int, default=DEFAULT_MAX_COUNT,
                        help=f"Maximum number of suboptimal structures (default: {DEFAULT_MAX_COUNT}).")
    parser.add_argument("--pair-energies", default=None,
                        help="Pair energy YAML for the weighted policy (defaults to package data).")
    parser.add_argument("--tempC", type=float, default=None,
                        help="Temperature in °C for the weighted policy (default: from the YAML).")
    parser.add_argument("--show-matrix", action="store_true",
                        help="Print the filled matrix.")
    parser.add_argument("--describe", action="store_true",
                        help="Print the recursion's description and LaTeX formula.")
    parser.add_argument("--json", action="store_true",
                        help="Emit JSON instead of human-readable text.")

    # Logging arguments
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity (-v=INFO, -vv=DEBUG)")
    parser.add_argument("--log-file", default=None,
                        help="Path to log file (default: var/log/nussinov_fold_TIMESTAMP.log if verbose)")
    parser.add_argument("--quiet", action="store_true",
                        help="Suppress all output except final result")
    return parser


def _input_error(message: str, as_json: bool) -> int:
    logger.error(message)
    if not as_json:
        print(f"Error: {message}", file=sys.stderr)
    return EXIT_INVALID_INPUT


def main(argv=None) -> int:
    """
    Parses command-line arguments and runs the fold.

    Returns
    -------
    int
        0 on success, 2 for invalid input, 1 if folding failed.
    """
    cli_args = build_parser().parse_args(argv)

    # --- Setup ---
    verbose_level = 0 if cli_args.quiet else cli_args.verbose
    setup_cli_logging(verbose_level, cli_args.log_file)

    logger.info("=" * 60)
    logger.info("Nussinov RNA Folding CLI")
    logger.info("=" * 60)

    try:
        normalized_sequence = validate_and_normalize_seq(cli_args.sequence)
    except ValueError as e:
        return _input_error(f"Sequence validation failed: {e}", cli_args.json)

    if cli_args.min_loop < 0:
        return _input_error(f"--min-loop must be non-negative, got {cli_args.min_loop}.", cli_args.json)
    if cli_args.delta is not None and cli_args.delta < 0:
        return _input_error(f"--delta must be non-negative, got {cli_args.delta}.", cli_args.json)
    if cli_args.max_count < 0:
        return _input_error(f"--max-count must be non-negative, got {cli_args.max_count}.", cli_args.json)

    policy = RecursionPolicy.parse(cli_args.policy)
    if cli_args.delta is not None and policy in (RecursionPolicy.COUNTING, RecursionPolicy.WEIGHTED):
        return _input_error(f"--delta is not available for the {policy.value} policy.", cli_args.json)

    pair_weight = None
    if policy is RecursionPolicy.WEIGHTED:
        try:
            pair_weight = load_pair_weight(cli_args.pair_energies, cli_args.tempC)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load pair energies: {e}", exc_info=True)
            if not cli_args.json:
                print(f"Failed to load pair energy YAML: {e}", file=sys.stderr)
            return EXIT_INVALID_INPUT
    elif cli_args.pair_energies is not None or cli_args.tempC is not None:
        logger.warning("--pair-energies/--tempC only apply to the weighted policy; ignored.")

    try:
        result = predict(
            normalized_sequence,
            policy,
            cli_args.min_loop,
            cli_args.delta,
            cli_args.max_count,
            pair_weight,
        )
    except NussinovFoldError as e:
        logger.error(f"Prediction failed: {e}", exc_info=True)
        if not cli_args.json:
            print(f"Prediction failed: {e}", file=sys.stderr)
        return EXIT_FAILURE

    matrix: NussinovMatrix = result["matrix"]

    # --- Output ---
    if cli_args.json:
        payload: Dict[str, Any] = {
            "policy": policy.value,
            "sequence": normalized_sequence,
            "length": len(normalized_sequence),
            "min_loop_length": cli_args.min_loop,
            "optimal_value": result["value"],
            "dot_bracket": result["dot_bracket"],
        }
        if cli_args.delta is not None:
            payload["delta"] = cli_args.delta
            payload["suboptimal"] = _suboptimal_to_json(result["suboptimal"])
        if cli_args.describe:
            payload["recursion"] = describe_policy(matrix)
        if cli_args.show_matrix:
            payload["matrix"] = matrix.to_string()
        print(json.dumps(payload, indent=2))
        return EXIT_OK

    if cli_args.describe:
        description = describe_policy(matrix)
        print(f"Recursion : {description['description']}")
        print(f"LaTeX : {description['latex']}")
    print(f"Policy : {policy.value}")
    print(f"Sequence Length : {len(normalized_sequence)}")
    print(f"Sequence : {normalized_sequence}")
    print(f"Optimal Value : {result['value']}")
    if result["dot_bracket"] is not None:
        print(f"Dot-Bracket Notation: {result['dot_bracket']}")
    if cli_args.delta is not None:
        print(f"Suboptimal structures (delta={cli_args.delta:g}):")
        for structure in result["suboptimal"]:
            print(f"  {structure.structure}  {structure.pair_count}")
    if cli_args.show_matrix:
        print(matrix.to_string(), end="")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
