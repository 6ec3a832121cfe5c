"""Fuzzy word matching.

Implements Levenshtein distance and the equality predicate used to
decide whether a spoken token counts as the reference word.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

# Common recognizer spellings of short words, keyed by reference word
COMMON_VARIANTS: dict[str, list[str]] = {
    "the": ["da", "duh", "thee", "th"],
    "is": ["iz"],
    "are": ["ar", "r", "er"],
    "and": ["n", "nd", "an"],
    "in": ["inn", "en"],
    "on": ["awn", "un"],
    "at": ["et", "ut"],
    "to": ["too", "two", "tu"],
    "for": ["fur", "fer"],
    "of": ["ov", "uv"],
    "a": ["ah", "uh"],
    "an": ["en", "un"],
    "this": ["dis", "thiz"],
    "that": ["dat", "thut"],
    "with": ["wit", "wiv"],
    "from": ["frum", "frm"],
    "by": ["bi", "bai"],
    "as": ["az", "uz"],
    "it": ["et", "ut"],
    "its": ["itz", "ets"],
}


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character insertions, deletions and
    substitutions turning `a` into `b`.
    """
    if a == b:
        return 0
    if not a or not b:
        return len(a) or len(b)
    if len(a) < len(b):
        a, b = b, a

    # costs[j] holds the distance between the current prefix of a and b[:j]
    costs = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        diagonal, costs[0] = costs[0], i
        for j, cb in enumerate(b, start=1):
            above = costs[j]
            costs[j] = min(above + 1, costs[j - 1] + 1, diagonal + (ca != cb))
            diagonal = above
    return costs[-1]


def fuzzy_equal(
    spoken: str,
    reference: str,
    max_distance: int = 1,
    variants: Mapping[str, Sequence[str]] | None = None,
) -> bool:
    """Decide whether a spoken token matches a reference token.

    Both arguments must already be normalized.

    Args:
        spoken: Normalized spoken token
        reference: Normalized reference token
        max_distance: Largest edit distance still counted as a match
        variants: Optional table of accepted spellings per reference word

    Returns:
        True on exact match, edit distance within the threshold, or a
        listed variant
    """
    if spoken == reference:
        return True
    if variants and spoken in variants.get(reference, ()):
        return True
    # Length difference is a lower bound on the distance
    if abs(len(spoken) - len(reference)) > max_distance:
        return False
    return levenshtein_distance(spoken, reference) <= max_distance
