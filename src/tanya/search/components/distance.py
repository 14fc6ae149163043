"""Edit-distance and set-overlap primitives.

Two execution strategies compute the same optimal-string-alignment distance
(Levenshtein plus adjacent transposition at cost 1):

- ``"matrix"``: full (len(a)+1) x (len(b)+1) table; simplest, used for
  short strings.
- ``"rolling"``: keeps only the three most recent rows (the transposition
  rule looks two rows back); used for long strings on large corpora.

Overlap measures (``jaccard``, ``token_jaccard``, ``bigram_overlap``,
``char_similarity``) are symmetric in their arguments.

Example:
    >>> from tanya.search.components.distance import edit_distance
    >>> edit_distance("harga", "hagra")
    1
    >>> edit_distance("harga", "hagra", strategy="rolling")
    1
"""

from __future__ import annotations

from typing import Iterable, Literal

Strategy = Literal["matrix", "rolling"]


def _matrix_distance(a: str, b: str) -> int:
    rows, cols = len(a) + 1, len(b) + 1
    table = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            best = min(
                table[i - 1][j] + 1,
                table[i][j - 1] + 1,
                table[i - 1][j - 1] + cost,
            )
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                best = min(best, table[i - 2][j - 2] + 1)
            table[i][j] = best

    return table[-1][-1]


def _rolling_distance(a: str, b: str) -> int:
    # Rows are indexed over the shorter string to keep them small.
    if len(b) > len(a):
        a, b = b, a
    cols = len(b) + 1
    before_previous: list[int] = []
    previous = list(range(cols))

    for i in range(1, len(a) + 1):
        current = [i] + [0] * (cols - 1)
        for j in range(1, cols):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            best = min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost)
            if i > 1 and j > 1 and a[i - 1] == b[j - 2] and a[i - 2] == b[j - 1]:
                best = min(best, before_previous[j - 2] + 1)
            current[j] = best
        before_previous, previous = previous, current

    return previous[-1]


def edit_distance(a: str, b: str, strategy: Strategy = "matrix") -> int:
    """Optimal-string-alignment distance between ``a`` and ``b``.

    Args:
        a: First string
        b: Second string
        strategy: "matrix" or "rolling"; both return the same value

    Returns:
        Minimum number of insertions, deletions, substitutions and
        adjacent transpositions turning ``a`` into ``b``.

    Raises:
        ValueError: If strategy is unknown
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if strategy == "matrix":
        return _matrix_distance(a, b)
    if strategy == "rolling":
        return _rolling_distance(a, b)
    raise ValueError(f"Unknown edit distance strategy: {strategy}")


def fast_distance(a: str, b: str) -> int:
    """Cheap distance estimate for short-circuiting on large corpora.

    Returns 3 (treated as "too far") when lengths differ by more than two.
    Otherwise counts first/last character mismatches plus characters of one
    word absent from the other, stopping once the count exceeds two.
    """
    if a == b:
        return 0
    if abs(len(a) - len(b)) > 2:
        return 3

    count = 0
    if a[:1] != b[:1]:
        count += 1
    if a[-1:] != b[-1:]:
        count += 1

    missing = 0
    for left, right in ((a, b), (b, a)):
        present = set(right)
        side = 0
        for ch in left:
            if ch not in present:
                side += 1
                if count + side > 2:
                    break
        missing = max(missing, side)

    return count + missing


def jaccard(left: Iterable[str], right: Iterable[str]) -> float:
    """Intersection over union; 0.0 when both sides are empty."""
    a, b = set(left), set(right)
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def word_set(text: str, min_length: int = 2) -> set[str]:
    return {word for word in text.split() if len(word) >= min_length}


def token_jaccard(a: str, b: str) -> float:
    """Jaccard over whitespace tokens longer than one character."""
    return jaccard(word_set(a), word_set(b))


def bigrams(text: str) -> set[str]:
    words = text.split()
    return {f"{first} {second}" for first, second in zip(words, words[1:])}


def bigram_overlap(a: str, b: str) -> float:
    """Jaccard over adjacent word pairs; 0.0 when either side has none.

    Identical texts score 1.0 even without any word pair.
    """
    if a == b:
        return 1.0
    left, right = bigrams(a), bigrams(b)
    if not left or not right:
        return 0.0
    return jaccard(left, right)


def length_ratio(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return min(len(a), len(b)) / longest


def char_similarity(a: str, b: str, strategy: Strategy = "matrix") -> float:
    """``1 - distance / max_len``, with a cheap exit for very different lengths."""
    if a == b:
        return 1.0
    ratio = length_ratio(a, b)
    if ratio < 0.5:
        return ratio * 0.5
    return 1.0 - edit_distance(a, b, strategy) / max(len(a), len(b))

