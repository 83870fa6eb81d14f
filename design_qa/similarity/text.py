"""Text normalization and string similarity measures."""

import re

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: str | None) -> str:
    """Lowercase, strip punctuation/symbols and collapse whitespace.

    Total over any input; ``None`` normalizes to the empty string.
    """
    if not text:
        return ""
    lowered = _PUNCTUATION.sub("", text.lower())
    return _WHITESPACE.sub(" ", lowered).strip()


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance with unit insert/delete/substitute costs."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Two rolling rows of the DP table
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current[j] = min(
                previous[j] + 1,  # deletion
                current[j - 1] + 1,  # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous = current
    return previous[-1]


def edit_similarity(a: str | None, b: str | None) -> float:
    """Normalized edit similarity in [0, 1].

    Returns 0.0 if either input is empty and 1.0 when both normalize to
    the same string.
    """
    if not a or not b:
        return 0.0

    norm_a = normalize(a)
    norm_b = normalize(b)
    if norm_a == norm_b:
        return 1.0

    max_length = max(len(norm_a), len(norm_b))
    return 1.0 - levenshtein_distance(norm_a, norm_b) / max_length


def _bigrams(text: str) -> list[str]:
    return [text[i : i + 2] for i in range(len(text) - 1)]


def dice_similarity(a: str | None, b: str | None) -> float:
    """Dice coefficient over character bigrams (case-insensitive).

    Cheap approximation of semantic similarity used when embeddings are
    unavailable.
    """
    if not a or not b:
        return 0.0

    lowered_a = a.lower()
    lowered_b = b.lower()
    if lowered_a == lowered_b:
        return 1.0

    pairs_a = _bigrams(lowered_a)
    pairs_b = _bigrams(lowered_b)
    total = len(pairs_a) + len(pairs_b)
    if total == 0:
        return 0.0

    seen = set(pairs_a)
    matches = sum(1 for pair in pairs_b if pair in seen)
    return min(1.0, 2.0 * matches / total)
