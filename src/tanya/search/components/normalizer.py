"""Text normalization for informal Indonesian chat text.

Lowercases, replaces punctuation with spaces (keeping accented Latin
letters), collapses whitespace and expands common chat abbreviations
token by token.

Example:
    >>> from tanya.search.components.normalizer import TextNormalizer
    >>> TextNormalizer().process("Sy mau tanya, yg premium ada?")
    'saya mau tanya yang premium ada'
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

from tanya.search.lexicon import ABBREVIATIONS

_PUNCTUATION = re.compile(r"[^\w\s\u00C0-\u017F]")
_WHITESPACE = re.compile(r"\s+")


@lru_cache(maxsize=4096)
def normalize(text: str) -> str:
    lowered = text.lower()
    stripped = _PUNCTUATION.sub(" ", lowered).replace("_", " ")
    tokens = _WHITESPACE.sub(" ", stripped).strip().split(" ")
    expanded = " ".join(ABBREVIATIONS.get(token, token) for token in tokens if token)
    return expanded


def tokens(text: str) -> list[str]:
    """Whitespace tokens of already-normalized text."""
    return text.split() if text else []


class TextNormalizer:
    """Normalizer component.

    Idempotent: ``process(process(x)) == process(x)``. Expansions never
    produce punctuation or abbreviations, so a second pass is a no-op.
    """

    def process(self, data: Any) -> str:
        if not isinstance(data, str) or not data:
            return ""
        return normalize(data)
