"""Tag aggregation for a scored query."""

from __future__ import annotations

import logging
from typing import Sequence

from tanya.config import EngineConfig
from tanya.search import lexicon
from tanya.search.components.features import STRONG_NEGATIVE, STRONG_POSITIVE, TextProfile
from tanya.search.types import RankedMatch

logger = logging.getLogger(__name__)

FALLBACK_TAG = "general"
RANK_DECAY = 0.15
COMPLEX_QUERY_CHARS = 100
SIMPLE_QUERY_WORDS = 3


class TagAggregator:
    """Merges classifier, match, pattern and meta tags into one sorted set.

    Never raises: any internal failure is logged and ``["general"]`` is
    returned instead.
    """

    def __init__(self, config: EngineConfig):
        self.config = config

    def aggregate(
        self,
        query: TextProfile,
        matches: Sequence[RankedMatch],
        predicted_tags: Sequence[str] = (),
        relevance: float = 0.0,
        reliable: bool = True,
    ) -> tuple[str, ...]:
        try:
            return tuple(sorted(self._collect(query, matches, predicted_tags, relevance, reliable)))
        except Exception as e:
            logger.error(f"[TagAggregator] Tag aggregation failed: {e}", exc_info=True)
            return (FALLBACK_TAG,)

    def _collect(
        self,
        query: TextProfile,
        matches: Sequence[RankedMatch],
        predicted_tags: Sequence[str],
        relevance: float,
        reliable: bool,
    ) -> set[str]:
        tags: set[str] = {tag for tag in predicted_tags if tag != lexicon.UNKNOWN_TAG}

        for position, match in enumerate(matches[: self.config.top_n]):
            weight = 1.0 - position * RANK_DECAY
            if weight > self.config.match_tag_min_weight:
                tags.update(match.entry.tags)
                if position == 0 and match.entry.category:
                    tags.add(match.entry.category)

        if query.words:
            question_type = lexicon.QUESTION_TYPE_TAGS.get(query.words[0])
            if question_type:
                tags.add(question_type)

        for pattern in query.patterns:
            tags.add(pattern)
            alias = lexicon.PATTERN_ALIASES.get(pattern)
            if alias:
                tags.add(alias)

        if relevance > self.config.high_confidence:
            tags.add("high-confidence")
        elif relevance < self.config.low_confidence:
            tags.add("low-confidence")

        if query.language:
            tags.add(query.language)

        if query.sentiment > STRONG_POSITIVE:
            tags.add("positive_sentiment")
        elif query.sentiment < STRONG_NEGATIVE:
            tags.add("negative_sentiment")

        if len(query.normalized) > COMPLEX_QUERY_CHARS:
            tags.add("complex_query")
        elif len(query.words) <= SIMPLE_QUERY_WORDS:
            tags.add("simple_query")

        if not reliable:
            if query.intent == lexicon.GENERAL_INTENT:
                tags.add(lexicon.UNKNOWN_TAG)
            else:
                tags.add(query.intent)

        if not tags:
            tags.add(lexicon.UNKNOWN_TAG)
        return tags
