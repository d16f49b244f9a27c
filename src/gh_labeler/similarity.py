"""Label name similarity based on Levenshtein distance."""

from __future__ import annotations

SIMILARITY_THRESHOLD = 0.7


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost edit distance over code points."""

    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + cost,
                )
            )
        previous = current
    return previous[-1]


def label_similarity(a: str, b: str) -> float:
    """Score how alike two label names are, case-insensitively.

    Returns 1.0 for identical names and decreases towards 0.0 as the edit
    distance approaches the length of the longer name.
    """

    a = a.lower()
    b = b.lower()
    if a == b:
        return 1.0

    distance = levenshtein_distance(a, b)
    return 1.0 - distance / max(len(a), len(b))
