from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
import logging
import time
from typing import List, Optional, Union

from tqdm import tqdm

from nussinov_fold.energies.pair_weights import ConstantPairWeight, PairWeightFn
from nussinov_fold.errors import UnsupportedPolicyError
from nussinov_fold.rules import are_complementary, is_admissible_pair
from nussinov_fold.structures import NussinovMatrix, Pair, TraceRecord
from nussinov_fold.structures.nussinov_matrix import Number
from nussinov_fold.utils import iter_spans, iter_split_points, iter_pairing_partners

logger = logging.getLogger(__name__)

# Name of the paired (closing-pair) companion table of the weighted recursion.
PAIRED_TABLE_NAME = "Qb"


class RecursionPolicy(Enum):
    """
    The recursions a Nussinov matrix can be filled with.

    AMBIGUOUS : Maximum pairing; every co-optimal derivation is kept.
    UNIQUE    : Maximum pairing; each structure has exactly one derivation.
    COUNTING  : Number of admissible nested structures.
    WEIGHTED  : Partition-function-like sum of structure weights.
    """
    AMBIGUOUS = "ambiguous"
    UNIQUE = "unique"
    COUNTING = "counting"
    WEIGHTED = "weighted"

    @classmethod
    def parse(cls, policy: Union["RecursionPolicy", str]) -> "RecursionPolicy":
        """Accepts a member or its (case-insensitive) value string."""
        if isinstance(policy, cls):
            return policy
        try:
            return cls(str(policy).strip().lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown recursion policy {policy!r}; choose one of: {choices}.") from None


@dataclass(slots=True)
class NussinovFoldingConfig:
    """
    Configuration settings for the Nussinov folding engine.

    Attributes
    ----------
    min_loop_length : int
        Minimum separation: a pair `(i, j)` needs `j - i > min_loop_length`.
    verbose : bool
        If True, enables verbose output, including a progress bar.
    """
    min_loop_length: int = 0
    verbose: bool = False


# ---------------------------------------------------------------------------
# Recursion policies
# ---------------------------------------------------------------------------

class NussinovRecursion(ABC):
    """
    Base class of all recursion policies.

    A policy owns the semantics of the cells of a `NussinovMatrix`: how a cell
    is filled, how its value is computed and, for max-count policies, which
    decompositions justify it.
    """
    policy: RecursionPolicy
    table_name: str = "D"
    description: str = ""
    latex: str = ""
    is_lazy: bool = False
    supports_traceback: bool = True

    @property
    def name(self) -> str:
        return self.policy.value

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    @abstractmethod
    def fill(self, matrix: NussinovMatrix, show_progress: bool = False) -> None:
        """Fills every cell of `matrix` this policy needs, in increasing-span order."""

    @abstractmethod
    def compute_value(self, matrix: NussinovMatrix, i: int, j: int) -> Number:
        """Value of cell `(i, j)` when first read."""

    def decompose(self, matrix: NussinovMatrix, i: int, j: int) -> List[TraceRecord]:
        raise UnsupportedPolicyError(f"The {self.name} recursion does not record decompositions.")


class MaxPairingRecursion(NussinovRecursion):
    """
    Maximum base pair count recursions.

    Cells start at 0 and are raised through `NussinovMatrix.update_cell`,
    one candidate derivation (as produced by `decompose`) at a time.
    """

    def compute_value(self, matrix: NussinovMatrix, i: int, j: int) -> Number:
        # Max-count cells are initialised to 0 and never left uncomputed.
        return 0

    def fill_cell(self, matrix: NussinovMatrix, i: int, j: int) -> None:
        for record in self.decompose(matrix, i, j):
            matrix.update_cell(i, j, record)

    def fill(self, matrix: NussinovMatrix, show_progress: bool = False) -> None:
        """
        Fills every interval of span `min_loop_length..n-1` in increasing-span order.

        Shorter intervals cannot hold a base pair and keep their initial 0.
        """
        n = matrix.seq_len
        min_span = matrix.min_loop_length
        total = sum(n - span for span in range(min_span, n))
        for i, j in tqdm(iter_spans(n, min_span), total=total, desc=f"Nussinov {self.name}",
                         leave=True, disable=not show_progress):
            self.fill_cell(matrix, i, j)

    def _pair_record(self, matrix: NussinovMatrix, k: int, j: int, parents) -> Optional[TraceRecord]:
        if not is_admissible_pair(k, j, matrix.min_loop_length):
            return None
        if not are_complementary(matrix.nucleotide(k), matrix.nucleotide(j)):
            return None
        return TraceRecord.of(parents, (Pair(k, j),))


class AmbiguousRecursion(MaxPairingRecursion):
    """
    Maximum pairing with all four classical cases.

    `D(i,j) = max(D(i+1,j), D(i,j-1), D(i+1,j-1)+1, max_k D(i,k)+D(k+1,j))`.
    The cases overlap, so one structure is usually reachable through several
    derivations; every tie is retained.
    """
    policy = RecursionPolicy.AMBIGUOUS
    description = "Ambiguous recursion"
    latex = (
        r"$D(i,j) = \max \begin{cases} D(i+1,j) & S_i \text{ unpaired} \\ "
        r"D(i,j-1) & S_j \text{ unpaired} \\ "
        r"D(i+1,j-1)+1 & S_i,S_j \text{ compl. base pair and } i+ l< j \\ "
        r"\max_{i< k< j} D(i,k)+D(k+1,j) & \text{decomposition} \end{cases}$"
    )

    def decompose(self, matrix: NussinovMatrix, i: int, j: int) -> List[TraceRecord]:
        records: List[TraceRecord] = []

        # i unpaired / j unpaired
        for parent in ((i + 1, j), (i, j - 1)):
            if matrix.in_domain(*parent):
                records.append(TraceRecord.of((parent,)))

        # (i, j) paired
        pair_record = self._pair_record(matrix, i, j, ((i + 1, j - 1),))
        if pair_record is not None:
            records.append(pair_record)

        # bifurcation
        for k in iter_split_points(i, j):
            records.append(TraceRecord.of(((i, k), (k + 1, j))))

        return records


class UniqueRecursion(MaxPairingRecursion):
    """
    Nussinov's recursion with unique decomposition.

    Either `j` is unpaired, or it pairs with some `k` in `[i, j)` splitting the
    interval into `[i, k-1]` and `[k+1, j-1]`. Each structure has exactly one
    derivation.
    """
    policy = RecursionPolicy.UNIQUE
    description = "Recursion by Nussinov et al. (1978) with unique decomposition"
    latex = (
        r"$D(i,j) = \max \begin{cases} D(i,j-1) & S_j \text{ unpaired} \\ "
        r"\max_{i\leq k< (j-l)} D(i,k-1)+D(k+1,j-1)+1 & S_k,S_j \text{ compl. base pair} \end{cases}$"
    )

    def decompose(self, matrix: NussinovMatrix, i: int, j: int) -> List[TraceRecord]:
        records: List[TraceRecord] = []
        if matrix.in_domain(i, j - 1):
            records.append(TraceRecord.of(((i, j - 1),)))

        for k in iter_pairing_partners(i, j, matrix.min_loop_length):
            pair_record = self._pair_record(matrix, k, j, ((i, k - 1), (k + 1, j - 1)))
            if pair_record is not None:
                records.append(pair_record)

        return records


class LazyRecursion(NussinovRecursion):
    """
    Sum-type recursions evaluated on demand and memoized by the matrix.

    `fill` evaluates every in-domain cell in increasing-span order, so that
    each evaluation only reads cached values and nothing is written after the
    fill. No traces are recorded.
    """
    is_lazy = True
    supports_traceback = False

    def fill(self, matrix: NussinovMatrix, show_progress: bool = False) -> None:
        n = matrix.seq_len
        total = sum(min(n - span, n) for span in range(-1, n))
        for i, j in tqdm(iter_spans(n, -1), total=total, desc=f"Nussinov {self.name}",
                         leave=True, disable=not show_progress):
            matrix.get_value(i, j)

        # Row 0 has no sequence position but is part of the table.
        for j in range(matrix.dim):
            matrix.get_value(0, j)


class CountingRecursion(LazyRecursion):
    """
    Counts the admissible nested structures of every interval.

    `C(i,j) = C(i,j-1) + sum_k C(i,k-1) * C(k+1,j-1)` over the partners `k` of
    `j`, with `C(i,j) = 1` for `i >= j`. Values are exact Python integers.
    """
    policy = RecursionPolicy.COUNTING
    table_name = "C"
    description = "Recursion to count number of total structures."
    latex = (
        r"$C_{i,j} = C_{i,j-1} + \sum_{i\leq k <(j-l) \atop S_k,S_j \text{ pair}} "
        r"C_{i,k-1} * C_{k+1,j-1} * 1 $"
    )

    def compute_value(self, matrix: NussinovMatrix, i: int, j: int) -> int:
        if i >= j:
            return 1

        count = matrix.get_value(i, j - 1)
        base_j = matrix.nucleotide(j)
        for k in iter_pairing_partners(i, j, matrix.min_loop_length):
            if are_complementary(matrix.nucleotide(k), base_j):
                count += matrix.get_value(i, k - 1) * matrix.get_value(k + 1, j - 1)
        return count


class PairedTableRecursion(LazyRecursion):
    """
    The closing-pair table `Q^b` of the weighted recursion.

    `Q^b(i,j) = Q(i+1,j-1) * w(i,j)` when `(i,j)` is admissible, else 0;
    `Q^b(i,j) = 1` for `i >= j`.
    """
    policy = RecursionPolicy.WEIGHTED
    table_name = PAIRED_TABLE_NAME
    description = "Recursion to count the energy of all the structures."
    latex = (
        r"$$Q_{i,j}^{b} = \begin{cases} Q_{i + 1, j - 1} * \exp(-E(bp)/RT) & "
        r"\text{ if }i,j \text{ can form base pair} \\ 0 & \text{ otherwise}\end{cases}$$"
    )

    def __init__(self, pair_weight: PairWeightFn):
        self.pair_weight = pair_weight

    def compute_value(self, matrix: NussinovMatrix, i: int, j: int) -> float:
        if i >= j:
            return 1.0
        if not is_admissible_pair(i, j, matrix.min_loop_length):
            return 0.0
        if not are_complementary(matrix.nucleotide(i), matrix.nucleotide(j)):
            return 0.0

        outer = matrix.companion(WeightedRecursion.table_name)
        return outer.get_value(i + 1, j - 1) * self.pair_weight(matrix.sequence, i, j)


class WeightedRecursion(LazyRecursion):
    """
    McCaskill-style partition function over the Nussinov energy model.

    `Q(i,j) = Q(i,j-1) + sum_k Q(i,k-1) * Q^b(k,j)`, `Q(i,j) = 1` for `i >= j`.
    The paired table `Q^b` lives in a companion matrix created on first use.

    Parameters
    ----------
    pair_weight : PairWeightFn, optional
        Weight of each closing pair. Defaults to the constant factor `e`.
    """
    policy = RecursionPolicy.WEIGHTED
    table_name = "Q"
    description = "Recursion to count the energy of all the structures."
    latex = r"$$Q_{i,j} = Q_{i,j-1} + \sum_{i\leq k <(j-l)} Q_{i,k-1} * Q^{b}_{k,j} $$"

    def __init__(self, pair_weight: Optional[PairWeightFn] = None):
        self.pair_weight = pair_weight if pair_weight is not None else ConstantPairWeight()

    def __repr__(self) -> str:
        return f"WeightedRecursion(pair_weight={self.pair_weight!r})"

    def paired_table(self, matrix: NussinovMatrix) -> NussinovMatrix:
        """Returns the `Q^b` companion of `matrix`, creating and attaching it if needed."""
        try:
            return matrix.companion(PAIRED_TABLE_NAME)
        except KeyError:
            paired = NussinovMatrix(
                matrix.sequence,
                matrix.min_loop_length,
                PairedTableRecursion(self.pair_weight),
                name=PAIRED_TABLE_NAME,
            )
            matrix.attach_companion(paired)
            return paired

    def compute_value(self, matrix: NussinovMatrix, i: int, j: int) -> float:
        if i >= j:
            return 1.0

        paired = self.paired_table(matrix)
        total = matrix.get_value(i, j - 1)
        for k in iter_pairing_partners(i, j, matrix.min_loop_length):
            closing = paired.get_value(k, j)
            if closing:
                total += matrix.get_value(i, k - 1) * closing
        return total

    def fill(self, matrix: NussinovMatrix, show_progress: bool = False) -> None:
        paired = self.paired_table(matrix)
        super().fill(matrix, show_progress)
        # Cells of Q^b that Q never reads (e.g. non-pairing ones) are evaluated too.
        for i, j in paired.iter_cells():
            paired.get_value(i, j)
        paired.mark_filled()


def make_recursion(
    policy: Union[RecursionPolicy, str] = RecursionPolicy.AMBIGUOUS,
    pair_weight: Optional[PairWeightFn] = None,
) -> NussinovRecursion:
    """
    Builds the recursion object for a policy.

    Parameters
    ----------
    policy : RecursionPolicy or str
        The policy or its value string (e.g. `"unique"`).
    pair_weight : PairWeightFn, optional
        Closing-pair weight of the weighted policy; ignored (with a warning)
        by the other policies.

    Raises
    ------
    ValueError
        If the policy is unknown.
    """
    policy = RecursionPolicy.parse(policy)

    if policy is RecursionPolicy.WEIGHTED:
        return WeightedRecursion(pair_weight)

    if pair_weight is not None:
        logger.warning(f"Pair weight is only used by the weighted recursion; ignored for '{policy.value}'.")

    if policy is RecursionPolicy.AMBIGUOUS:
        return AmbiguousRecursion()
    if policy is RecursionPolicy.UNIQUE:
        return UniqueRecursion()
    return CountingRecursion()


# ---------------------------------------------------------------------------
# Folding engine
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class NussinovFoldingEngine:
    """
    Drives the filling of a Nussinov matrix with a recursion policy.

    Attributes
    ----------
    recursion : NussinovRecursion
        The policy deciding the cell semantics.
    config : NussinovFoldingConfig
        Minimum loop length and verbosity.
    """
    recursion: NussinovRecursion
    config: NussinovFoldingConfig

    def new_matrix(self, seq: str) -> NussinovMatrix:
        """
        Allocates an unfilled matrix for `seq` bound to this engine's recursion.

        Raises
        ------
        InvalidSequenceError
            If `seq` is not a non-empty string over {A, C, G, U}.
        """
        return NussinovMatrix(seq, self.config.min_loop_length, self.recursion, name=self.recursion.table_name)

    def fold(self, seq: str) -> NussinovMatrix:
        """Allocates and fills a matrix for `seq`."""
        matrix = self.new_matrix(seq)
        self.fill_matrix(matrix)
        return matrix

    def fill_matrix(self, matrix: NussinovMatrix) -> None:
        """
        Fills `matrix` in increasing-span order.

        Filling is done once; calling this again on a filled matrix is a no-op,
        so repeated calls leave values and traces unchanged.

        Parameters
        ----------
        matrix : NussinovMatrix
            A matrix bound to this engine's recursion.
        """
        if matrix.recursion is not self.recursion:
            raise ValueError("Matrix is bound to a different recursion than this engine.")
        if matrix.is_filled:
            logger.debug(f"Matrix {matrix.name} already filled; skipping.")
            return

        start_time = time.perf_counter()
        n = matrix.seq_len

        logger.info("=" * 60)
        logger.info(f"Nussinov ({self.recursion.name}) DP for sequence length N={n}, "
                    f"min loop length {matrix.min_loop_length}")
        logger.info(f"Expected complexity: O(N³) ≈ {n ** 3:,} operations")
        logger.info("=" * 60)

        self.recursion.fill(matrix, show_progress=self.config.verbose)
        matrix.mark_filled()

        elapsed = time.perf_counter() - start_time
        top_i, top_j = matrix.top_cell
        top_cell = matrix.get_cell(top_i, top_j)

        logger.info(f"Nussinov DP completed in {elapsed:.2f}s ({elapsed * 1000:.0f}ms)")
        logger.info(f"Final {matrix.name}[{top_i},{top_j}] = {top_cell.value}")
        logger.debug(f"Top cell traces: {len(top_cell.traces)}")
        for record in top_cell.traces:
            logger.debug(f"  parents={record.parent_cells} pairs={[p.as_tuple() for p in record.pairs]}")
