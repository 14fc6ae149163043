"""Lexicon sentiment scoring on a 0..1 scale (0.5 = neutral)."""

from __future__ import annotations

from tanya.search import lexicon

NEUTRAL = 0.5
INTENSIFIER_FACTOR = 1.5
EXPRESSION_WEIGHT = 1.5


def raw_sentiment(text: str) -> float:
    """Signed score in [-1, 1]; 0.0 when no sentiment words are present."""
    if not text:
        return 0.0

    score = 0.0
    hits = 0
    intensify = False
    negate = False

    for word in text.split():
        if word in lexicon.INTENSIFIERS:
            intensify = True
            continue
        if word in lexicon.NEGATORS:
            negate = True
            continue

        if word in lexicon.POSITIVE_WORDS:
            polarity = 1.0
        elif word in lexicon.NEGATIVE_WORDS:
            polarity = -1.0
        else:
            # Modifiers only reach the next word.
            intensify = negate = False
            continue

        if intensify:
            polarity *= INTENSIFIER_FACTOR
        if negate:
            polarity = -polarity
        score += polarity
        hits += 1
        intensify = negate = False

    for expression in lexicon.POSITIVE_EXPRESSIONS:
        if expression in text:
            score += EXPRESSION_WEIGHT
            hits += 1
    for expression in lexicon.NEGATIVE_EXPRESSIONS:
        if expression in text:
            score -= EXPRESSION_WEIGHT
            hits += 1

    if hits == 0:
        return 0.0
    return max(-1.0, min(1.0, score / (hits * INTENSIFIER_FACTOR)))


class SentimentScorer:
    """Maps normalized text to a sentiment in [0, 1]."""

    def process(self, data: str) -> float:
        return NEUTRAL + raw_sentiment(data) / 2
