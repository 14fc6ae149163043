"""Multi-signal similarity between a query and a corpus entry.

Four scores are computed per pair of :class:`TextProfile` objects:

- exact: composite overlap similarity on normalized text
- stemmed: the same composite on stemmed text
- semantic: intent/pattern/entity/topic/sentiment blend
- contextual: topic-vector cosine

and folded into ``combined`` with tier-dependent weights. All scores are in
[0, 1] and identical normalized texts score 1.0 on every measure.

Expensive measures are memoized in :class:`BoundedCache` instances owned by
the engine. Cache keys are the full compared strings in sorted order, so a
cached lookup always returns exactly what a fresh computation would.

Example:
    >>> from tanya.config import EngineConfig
    >>> from tanya.search.strategy import COMPACT
    >>> from tanya.search.components.features import FeatureExtractor
    >>> from tanya.search.components.similarity import SimilarityEngine
    >>> extractor = FeatureExtractor(EngineConfig(), COMPACT)
    >>> engine = SimilarityEngine(EngineConfig(), COMPACT, extractor)
    >>> score = engine.score(extractor.profile("selamat pagi"), extractor.profile("Selamat pagi"))
    >>> score.combined
    1.0
"""

from __future__ import annotations

import logging

from tanya.config import EngineConfig
from tanya.search import lexicon
from tanya.search.cache import BoundedCache, CacheStats
from tanya.search.components.distance import (
    bigram_overlap,
    char_similarity,
    edit_distance,
    fast_distance,
    jaccard,
    length_ratio,
    token_jaccard,
    word_set,
)
from tanya.search.components.features import FeatureExtractor, TextProfile, cosine
from tanya.search.strategy import TierStrategy
from tanya.search.types import SimilarityScore

logger = logging.getLogger(__name__)

MIN_LENGTH_RATIO = 0.3
SHORT_TEXT_WORDS = 3
HIGH_JACCARD = 0.8
MIN_CONTEXT_CHARS = 10


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _pair(a: str, b: str) -> tuple[str, str]:
    return (a, b) if a <= b else (b, a)


def intent_similarity(left: str, right: str) -> float:
    """1.0 same intent, 0.3 when either has none, 0.5 related, else 0.1."""
    if lexicon.GENERAL_INTENT in (left, right):
        return 0.3
    if left == right:
        return 1.0
    if right in lexicon.RELATED_INTENTS.get(left, ()) or left in lexicon.RELATED_INTENTS.get(right, ()):
        return 0.5
    return 0.1


class SimilarityEngine:
    """Scores profile pairs; one instance per loaded corpus.

    Args:
        config: Engine configuration
        strategy: Tier strategy chosen for the loaded corpus
        extractor: Feature extractor built with the same strategy
    """

    def __init__(self, config: EngineConfig, strategy: TierStrategy, extractor: FeatureExtractor):
        self.config = config
        self.strategy = strategy
        self.extractor = extractor
        enabled = config.cache_enabled
        self._overlap_cache = BoundedCache("overlap", config.similarity_cache_size, enabled)
        self._semantic_cache = BoundedCache("semantic", config.semantic_cache_size, enabled)
        self._context_cache = BoundedCache("context", config.context_cache_size, enabled)
        self._distance_cache = BoundedCache("distance", config.distance_cache_size, enabled)

    def cache_stats(self) -> list[CacheStats]:
        return [
            cache.stats()
            for cache in (self._overlap_cache, self._semantic_cache, self._context_cache, self._distance_cache)
        ]

    # ------------------------------------------------------------------
    # Public scores
    # ------------------------------------------------------------------

    def score(self, query: TextProfile, entry: TextProfile) -> SimilarityScore:
        if query.normalized == entry.normalized:
            return SimilarityScore.identical()

        exact = self.overlap(query.normalized, entry.normalized)
        stemmed = self.overlap(query.stemmed, entry.stemmed)
        semantic = self.semantic(query, entry)
        contextual = self.contextual(query, entry)

        weights = self.strategy.combined
        combined = _clamp(
            exact * weights.exact
            + stemmed * weights.stemmed
            + semantic * weights.semantic
            + contextual * weights.contextual
        )
        return SimilarityScore(
            exact=exact,
            stemmed=stemmed,
            semantic=semantic,
            contextual=contextual,
            combined=combined,
        )

    def overlap(self, a: str, b: str) -> float:
        """Composite overlap similarity of two normalized (or stemmed) texts."""
        if a == b:
            return 1.0
        return self._overlap_cache.get_or_compute(_pair(a, b), lambda: self._overlap(a, b))

    def semantic(self, left: TextProfile, right: TextProfile) -> float:
        if left.normalized == right.normalized:
            return 1.0
        key = _pair(left.raw, right.raw)
        return self._semantic_cache.get_or_compute(key, lambda: self._semantic(left, right))

    def contextual(self, left: TextProfile, right: TextProfile) -> float:
        if left.normalized == right.normalized:
            return 1.0
        key = _pair(left.normalized, right.normalized)
        return self._context_cache.get_or_compute(key, lambda: self._contextual(left, right))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _overlap(self, a: str, b: str) -> float:
        if not a or not b:
            return 0.0
        ratio = length_ratio(a, b)
        if ratio < MIN_LENGTH_RATIO:
            return ratio * 0.5

        left, right = word_set(a), word_set(b)
        base = jaccard(left, right)
        if (len(left) <= SHORT_TEXT_WORDS and len(right) <= SHORT_TEXT_WORDS) or base > HIGH_JACCARD:
            return base

        union = len(left | right)
        near = (self._near_matches(left, right) + self._near_matches(right, left)) / 2
        fuzzy = _clamp((len(left & right) + near) / union) if union else 0.0
        char = self._char_similarity(a, b)
        keyword = self._keyword_similarity(left, right)

        weights = self.strategy.overlap
        ngram = bigram_overlap(a, b) if weights.ngram else 0.0
        return _clamp(
            base * weights.jaccard
            + fuzzy * weights.fuzzy
            + char * weights.char
            + keyword * weights.keyword
            + ngram * weights.ngram
        )

    def _near_matches(self, words: set[str], others: set[str]) -> int:
        """Count words with a near-miss (typo-distance) partner on the other side."""
        candidates_pool = sorted(w for w in others - words if len(w) >= 3)
        pending = sorted(w for w in words - others if len(w) >= 3)
        if self.strategy.max_fuzzy_words is not None:
            pending = pending[: self.strategy.max_fuzzy_words]

        count = 0
        for word in pending:
            candidates = [c for c in candidates_pool if abs(len(c) - len(word)) <= 2]
            if self.strategy.max_fuzzy_candidates is not None:
                candidates = candidates[: self.strategy.max_fuzzy_candidates]
            for candidate in candidates:
                allowed = 1 if min(len(word), len(candidate)) <= 5 else 2
                if self.strategy.fast_word_distance and fast_distance(word, candidate) > 2:
                    continue
                if self._word_distance(word, candidate) <= allowed:
                    count += 1
                    break
        return count

    def _word_distance(self, a: str, b: str) -> int:
        return self._distance_cache.get_or_compute(_pair(a, b), lambda: edit_distance(a, b))

    def _char_similarity(self, a: str, b: str) -> float:
        long_text = max(len(a), len(b)) > self.config.rolling_distance_min_length
        strategy = "rolling" if self.strategy.is_large and long_text else "matrix"
        return char_similarity(a, b, strategy)

    def _keyword_similarity(self, left: set[str], right: set[str]) -> float:
        important = self.strategy.important_keywords
        left_keys, right_keys = left & important, right & important
        if not left_keys and not right_keys:
            return 0.0
        return jaccard(left_keys, right_keys)

    def _is_long(self, *texts: str) -> bool:
        limit = self.strategy.long_text_length
        return limit is not None and max(len(text) for text in texts) >= limit

    def _semantic(self, left: TextProfile, right: TextProfile) -> float:
        ratio = length_ratio(left.normalized, right.normalized)
        if ratio < MIN_LENGTH_RATIO:
            return ratio * 0.5

        long_text = self._is_long(left.normalized, right.normalized)
        intent = intent_similarity(left.intent, right.intent)
        patterns = 0.5 if long_text else jaccard(left.patterns, right.patterns)
        entities = jaccard(left.entities, right.entities)
        context = 0.5 if long_text else self.contextual(left, right)
        if left.has_strong_sentiment or right.has_strong_sentiment:
            sentiment = 1.0 - abs(left.sentiment - right.sentiment)
        else:
            sentiment = 0.5

        weights = self.strategy.semantic
        return _clamp(
            intent * weights.intent
            + patterns * weights.pattern
            + entities * weights.entity
            + context * weights.context
            + sentiment * weights.sentiment
        )

    def _contextual(self, left: TextProfile, right: TextProfile) -> float:
        a, b = left.normalized, right.normalized
        if len(a) < MIN_CONTEXT_CHARS or len(b) < MIN_CONTEXT_CHARS:
            return token_jaccard(a, b)

        if self.strategy.is_large:
            topics = self.strategy.context_topics
            limit = self.strategy.topic_keyword_limit
            return cosine(
                self.extractor.topic_vector(a, topics, limit),
                self.extractor.topic_vector(b, topics, limit),
            )
        return cosine(left.topics, right.topics)
