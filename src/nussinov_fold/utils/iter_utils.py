from typing import Iterator, Tuple


def iter_spans(seq_len: int, min_span: int = 0) -> Iterator[Tuple[int, int]]:
    """
    Iterates through all 1-based intervals `(i, j)` in increasing-span order.

    For every span `d` from `min_span` up to `seq_len - 1`, yields `(i, i + d)`
    for each start `i` such that `1 <= i <= seq_len` and `i + d <= seq_len`. Every interval
    is therefore visited after all intervals of strictly smaller span, which
    is the order the Nussinov recursions require.

    Parameters
    ----------
    seq_len : int
        The length of the sequence.
    min_span : int, optional
        The smallest span `j - i` to visit. May be negative: `-1` includes the
        empty intervals `(i, i - 1)`. By default 0.

    Yields
    ------
    Iterator[Tuple[int, int]]
        `(i, j)` tuples.
    """
    for span in range(min_span, seq_len):
        # Rows stop at seq_len: (seq_len + 1, seq_len) is not a matrix cell.
        last_i = min(seq_len - span, seq_len)
        for i in range(1, last_i + 1):
            yield i, i + span


def iter_split_points(base_i: int, base_j: int) -> Iterator[int]:
    """
    Yields every split point `k` strictly between `i` and `j`.

    A split at `k` decomposes `[i, j]` into `[i, k]` and `[k + 1, j]`.
    """
    for k in range(base_i + 1, base_j):
        yield k


def iter_pairing_partners(base_i: int, base_j: int, min_loop_length: int) -> Iterator[int]:
    """
    Yields every `k` in `[i, j)` far enough from `j` to pair with it.

    These are the candidate 5' partners `k` of position `j` inside `[i, j]`,
    i.e. `i <= k` and `j - k > min_loop_length`.
    """
    for k in range(base_i, base_j - min_loop_length):
        yield k
