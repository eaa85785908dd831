# structsim/distance.py
from typing import Sequence, Tuple


def levenshtein(seq_a: Sequence[str], seq_b: Sequence[str]) -> int:
    """
    Edit distance between two sequences of strings: unit cost insert/delete,
    substitution free for equal elements. Keeps two DP rows sized by the
    shorter sequence, so memory is O(min(n, m)).
    """
    a, b = seq_a, seq_b
    if len(b) > len(a):
        a, b = b, a
    n, m = len(a), len(b)
    if m == 0:
        return n

    prev = list(range(m + 1))
    cur = [0] * (m + 1)
    for i in range(1, n + 1):
        cur[0] = i
        ai = a[i - 1]
        for j in range(1, m + 1):
            cost = 0 if ai == b[j - 1] else 1
            cur[j] = min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost)
        prev, cur = cur, prev
    return prev[m]


def similarity_from_distance(distance: int, len_a: int, len_b: int) -> float:
    longest = max(len_a, len_b)
    if longest == 0:
        return 1.0
    sim = 1.0 - float(distance) / float(longest)
    return max(0.0, min(1.0, sim))


def compare(seq_a: Sequence[str], seq_b: Sequence[str]) -> Tuple[int, float]:
    """Return (edit distance, similarity in [0, 1]) of two flat sequences."""
    dist = levenshtein(seq_a, seq_b)
    return dist, similarity_from_distance(dist, len(seq_a), len(seq_b))
