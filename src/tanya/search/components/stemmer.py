"""Rule-based Indonesian stemmer.

Each pass strips one particle (-lah, -kah, -tah, -pun), one possessive
(-nya, and -ku/-mu on longer words), one derivational suffix (-kan, -an,
-i) and one prefix. Passes repeat until the word stops changing, so a
stem always stems to itself. It is a light stemmer: good enough to line
up ``pembayaran``/``bayar``-style variants for overlap scoring, not a
morphological analyser.
"""

from __future__ import annotations

import re
from functools import lru_cache

_PARTICLE = re.compile(r"(lah|kah|tah|pun)$")
_POSSESSIVE = re.compile(r"nya$")
_SHORT_POSSESSIVE = re.compile(r"(ku|mu)$")
_DERIVATIONAL = re.compile(r"(kan|an|i)$")

# Most specific first.
PREFIXES = ("meng", "meny", "mem", "men", "ber", "ter", "me", "di", "ke", "se")

MIN_TOKEN = 3
MIN_STEM = 2
MIN_DERIVED_REMAINDER = 5
MIN_PREFIX_REMAINDER = 4


def _strip(pattern: re.Pattern, word: str, min_remaining: int) -> str:
    candidate = pattern.sub("", word)
    return candidate if len(candidate) >= min_remaining else word


def _stem_once(word: str) -> str:
    result = _strip(_PARTICLE, word, MIN_TOKEN)
    result = _strip(_POSSESSIVE, result, MIN_TOKEN)
    if len(result) >= 6:
        result = _strip(_SHORT_POSSESSIVE, result, 4)
    if len(result) > 4:
        result = _strip(_DERIVATIONAL, result, MIN_DERIVED_REMAINDER)

    for prefix in PREFIXES:
        if result.startswith(prefix) and len(result) - len(prefix) >= MIN_PREFIX_REMAINDER:
            result = result[len(prefix):]
            break

    return result if len(result) >= MIN_STEM else word


@lru_cache(maxsize=8192)
def stem(word: str) -> str:
    """Stem one lowercase token."""
    if len(word) < MIN_TOKEN:
        return word

    # Every pass shortens the word or returns it unchanged.
    result = _stem_once(word)
    while result != word:
        word, result = result, _stem_once(result)
    return result


def stem_text(text: str) -> str:
    """Stem every whitespace token of ``text`` and rejoin with single spaces."""
    return " ".join(stem(token) for token in text.split())


class Stemmer:
    """Stemmer component wrapping :func:`stem_text`."""

    def process(self, data: str) -> str:
        if not isinstance(data, str):
            raise TypeError(f"Input must be str, got {type(data).__name__}")
        return stem_text(data)
