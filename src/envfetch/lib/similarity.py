"""Fuzzy matching of variable names for "did you mean" suggestions.

Example:
    >>> find_similar("path", ["PATH", "HOME", "USER"], threshold=0.8)
    ['PATH']
"""

from collections.abc import Iterable
from difflib import SequenceMatcher

SIMILARITY_THRESHOLD = 0.6


def similarity(a: str, b: str) -> float:
    """Case-insensitive similarity ratio between two strings, in ``[0, 1]``."""
    return SequenceMatcher(None, a.lower(), b.lower()).ratio()


def find_similar(
    target: str,
    candidates: Iterable[str],
    threshold: float = SIMILARITY_THRESHOLD,
) -> list[str]:
    """Return the candidates scoring strictly above ``threshold``.

    Candidates keep their input order; results are never re-sorted by score.
    """
    return [name for name in candidates if similarity(target, name) > threshold]
