"""Feature extraction for similarity scoring and tag classification.

This module turns raw question text into two things:

1. A :class:`TextProfile`, the precomputed per-text signals the similarity
   engine compares (normalized/stemmed text, pattern and entity sets,
   topic vector, intent, sentiment). Corpus profiles are built once at
   load time; a query profile is built once per query.
2. A fixed-shape feature vector for the tag classifier. Every vector has
   exactly the keys of :data:`FEATURE_NAMES`, in that order, so vectors
   produced at training time and at inference time line up.

Keyword detection follows a two-step match: a direct substring check
first, then (on the compact tier) an edit-distance-tolerant comparison of
every query word against every keyword so that typos such as ``pembayarn``
still trigger the ``payment`` pattern.

Example:
    >>> from tanya.config import EngineConfig
    >>> from tanya.search.strategy import COMPACT
    >>> from tanya.search.components.features import FeatureExtractor
    >>> extractor = FeatureExtractor(EngineConfig(), COMPACT)
    >>> profile = extractor.profile("Berapa harga Netflix?")
    >>> profile.intent
    'price_inquiry'
    >>> sorted(profile.entities)
    ['netflix']
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

from tanya.config import EngineConfig
from tanya.search import lexicon
from tanya.search.cache import BoundedCache
from tanya.search.components.distance import edit_distance
from tanya.search.components.normalizer import TextNormalizer
from tanya.search.components.sentiment import SentimentScorer
from tanya.search.components.stemmer import stem, stem_text
from tanya.search.strategy import TierStrategy

logger = logging.getLogger(__name__)

WORD_SLOTS = 10
TRIGRAM_WORDS = 5
TRIGRAMS_PER_WORD = 3
SHORT_QUERY_CHARS = 15
LONG_QUERY_CHARS = 50
VERY_SHORT_QUERY_WORDS = 3
LANGUAGE_MARKER_RATIO = 0.15
STRONG_POSITIVE = 0.7
STRONG_NEGATIVE = 0.3

_CONJUNCTIONS = re.compile(lexicon.CONJUNCTIONS)
_SUBORDINATES = re.compile(lexicon.SUBORDINATE_MARKERS)
_INTENT_RULES = tuple((name, re.compile(rule)) for name, rule in lexicon.INTENT_RULES)


def _build_feature_names() -> tuple[str, ...]:
    names = ["is_indonesian", "is_english"]
    names += [f"word_{i}" for i in range(WORD_SLOTS)]
    names += [
        f"trigram_{w}_{k}" for w in range(TRIGRAM_WORDS) for k in range(TRIGRAMS_PER_WORD)
    ]
    names += ["text_length", "word_count", "avg_word_length", "complexity"]
    names += list(lexicon.QUESTION_FEATURES)
    names += list(lexicon.INTENT_FEATURES)
    names += list(lexicon.SERVICE_FEATURES)
    names += [f"entity_{name.replace(' ', '_')}" for name in lexicon.ENTITIES]
    names += [f"topic_{name}" for name in lexicon.TOPICS]
    names += ["sentiment", "is_positive", "is_negative", "is_neutral"]
    return tuple(names)


FEATURE_NAMES: tuple[str, ...] = _build_feature_names()


def word_hash(word: str) -> float:
    """Lossy numeric encoding of a word: sum of code points mod 255, over 255."""
    return (sum(ord(ch) for ch in word) % 255) / 255


def cosine(left: Sequence[float], right: Sequence[float]) -> float:
    dot = sum(a * b for a, b in zip(left, right))
    norm_left = math.sqrt(sum(a * a for a in left))
    norm_right = math.sqrt(sum(b * b for b in right))
    if norm_left == 0 or norm_right == 0:
        return 0.0
    return max(0.0, min(1.0, dot / (norm_left * norm_right)))


@dataclass(frozen=True)
class TextProfile:
    raw: str
    normalized: str
    stemmed: str
    words: tuple[str, ...]
    patterns: frozenset[str]
    entities: frozenset[str]
    topics: tuple[float, ...]
    intent: str
    sentiment: float
    language: str | None

    @property
    def has_strong_sentiment(self) -> bool:
        return "positive_sentiment" in self.patterns or "negative_sentiment" in self.patterns


class FeatureExtractor:
    """Pattern, entity, topic, sentiment and classifier-feature extraction.

    Args:
        config: Engine configuration (fuzzy thresholds, cache sizes)
        strategy: Tier strategy; LARGE disables fuzzy keyword matching
        cache: Optional cache for profiles; created from config if omitted
    """

    def __init__(
        self,
        config: EngineConfig,
        strategy: TierStrategy,
        cache: BoundedCache | None = None,
    ):
        self.config = config
        self.strategy = strategy
        self.normalizer = TextNormalizer()
        self.sentiment = SentimentScorer()
        self._profiles = cache if cache is not None else BoundedCache(
            "profile", config.vector_cache_size, enabled=config.cache_enabled
        )

    # ------------------------------------------------------------------
    # Keyword matching
    # ------------------------------------------------------------------

    def keyword_match(self, text: str, keywords: Iterable[str], fuzzy: bool | None = None) -> bool:
        """True when any keyword occurs in ``text`` (normalized).

        Keywords of one or two characters must match a whole word; longer
        keywords match as substrings. With ``fuzzy`` (default: tier setting)
        words are also compared by edit-distance similarity.
        """
        if not text:
            return False
        keywords = tuple(keywords)
        words = text.split()
        word_set = set(words)

        for keyword in keywords:
            if len(keyword) <= 2:
                if keyword in word_set:
                    return True
            elif keyword in text:
                return True

        if fuzzy is None:
            fuzzy = self.strategy.fuzzy_keywords
        if not fuzzy:
            return False

        threshold = self.config.fuzzy_threshold
        partial = self.config.partial_match_threshold
        for word in words:
            if len(word) <= 2:
                continue
            for keyword in keywords:
                if len(keyword) <= 2 or " " in keyword:
                    continue
                longest = max(len(word), len(keyword))
                if 1 - edit_distance(word, keyword) / longest >= threshold:
                    return True
                if len(word) > 3 and len(keyword) > 3:
                    part = min(len(word), len(keyword)) - 1
                    head_distance = edit_distance(word[:part], keyword[:part])
                    if 1 - head_distance / part >= partial:
                        return True
        return False

    # ------------------------------------------------------------------
    # Detectors
    # ------------------------------------------------------------------

    def extract_patterns(self, raw: str, normalized: str | None = None) -> list[str]:
        """Question-type, intent, structural and sentiment pattern tags."""
        if normalized is None:
            normalized = self.normalizer.process(raw)
        patterns = [
            name for name, keywords in lexicon.PATTERNS.items()
            if self.keyword_match(normalized, keywords)
        ]

        raw = raw or ""
        if "?" in raw:
            patterns.append("question_mark")
        if "!" in raw:
            patterns.append("exclamation")
        if len(normalized) < SHORT_QUERY_CHARS:
            patterns.append("short_query")
        if len(normalized) > LONG_QUERY_CHARS:
            patterns.append("long_query")
        if len(normalized.split()) <= VERY_SHORT_QUERY_WORDS:
            patterns.append("very_short_query")

        sentiment = self.sentiment.process(normalized)
        if sentiment > STRONG_POSITIVE:
            patterns.append("positive_sentiment")
        elif sentiment < STRONG_NEGATIVE:
            patterns.append("negative_sentiment")
        return patterns

    def extract_entities(self, normalized: str) -> frozenset[str]:
        words = set(normalized.split())
        found = set()
        for entity in lexicon.ENTITIES:
            if " " in entity:
                if entity in normalized:
                    found.add(entity)
            elif entity in words:
                found.add(entity)
        return frozenset(found)

    def topic_vector(
        self,
        normalized: str,
        topics: Sequence[str] | None = None,
        keyword_limit: int | None = None,
    ) -> tuple[float, ...]:
        """Fraction of each topic's keywords present in ``normalized``."""
        names = tuple(lexicon.TOPICS) if topics is None else tuple(topics)
        vector = []
        for name in names:
            keywords = lexicon.TOPICS[name]
            if keyword_limit is not None:
                keywords = keywords[:keyword_limit]
            found = sum(1 for keyword in keywords if keyword in normalized)
            vector.append(found / len(keywords))
        return tuple(vector)

    def extract_intent(self, normalized: str) -> str:
        for name, rule in _INTENT_RULES:
            if rule.search(normalized):
                return name
        return lexicon.GENERAL_INTENT

    def detect_language(self, normalized: str) -> str | None:
        words = normalized.split()
        if not words:
            return None
        for language, markers in (
            ("indonesian", lexicon.INDONESIAN_MARKERS),
            ("english", lexicon.ENGLISH_MARKERS),
        ):
            count = sum(1 for word in words if word in markers)
            if count >= 1 and count / len(words) > LANGUAGE_MARKER_RATIO:
                return language
        return None

    def complexity(self, normalized: str, raw: str | None = None) -> float:
        words = normalized.split()
        if not words:
            return 0.0
        avg_length = sum(len(word) for word in words) / len(words)
        long_ratio = sum(1 for word in words if len(word) > 6) / len(words)

        score = min(len(words) / 20, 0.3)
        score += min(avg_length / 10, 0.2)
        score += min(long_ratio, 0.15)
        if (raw or normalized).count("?") > 1:
            score += 0.15
        if _CONJUNCTIONS.search(normalized):
            score += 0.1
        if _SUBORDINATES.search(normalized):
            score += 0.1
        return min(score, 1.0)

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def profile(self, raw: str) -> TextProfile:
        """Build (or fetch from cache) the comparison profile of ``raw``."""
        return self._profiles.get_or_compute(raw, lambda: self._build_profile(raw))

    def _build_profile(self, raw: str) -> TextProfile:
        normalized = self.normalizer.process(raw)
        return TextProfile(
            raw=raw,
            normalized=normalized,
            stemmed=stem_text(normalized),
            words=tuple(normalized.split()),
            patterns=frozenset(self.extract_patterns(raw, normalized)),
            entities=self.extract_entities(normalized),
            topics=self.topic_vector(normalized),
            intent=self.extract_intent(normalized),
            sentiment=self.sentiment.process(normalized),
            language=self.detect_language(normalized),
        )

    def feature_vector(self, raw: str) -> dict[str, float]:
        """Classifier input: ``FEATURE_NAMES`` mapped to values in [0, 1]."""
        profile = self.profile(raw)
        normalized = profile.normalized
        words = list(profile.words)
        vector = dict.fromkeys(FEATURE_NAMES, 0.0)

        vector["is_indonesian"] = 1.0 if profile.language == "indonesian" else 0.0
        vector["is_english"] = 1.0 if profile.language == "english" else 0.0

        slot_words = [stem(word) for word in words] if profile.language == "indonesian" else words
        for i, word in enumerate(slot_words[:WORD_SLOTS]):
            vector[f"word_{i}"] = word_hash(word) if len(word) >= 2 else 0.0

        for w, word in enumerate(words[:TRIGRAM_WORDS]):
            if len(word) < 3:
                continue
            for k in range(min(TRIGRAMS_PER_WORD, len(word) - 2)):
                vector[f"trigram_{w}_{k}"] = word_hash(word[k:k + 3])

        vector["text_length"] = min(len(normalized) / 100, 1.0)
        vector["word_count"] = min(len(words) / 20, 1.0)
        if words:
            vector["avg_word_length"] = min(sum(len(w) for w in words) / len(words) / 10, 1.0)
        vector["complexity"] = self.complexity(normalized, raw)

        for group in (lexicon.QUESTION_FEATURES, lexicon.INTENT_FEATURES, lexicon.SERVICE_FEATURES):
            for name, keywords in group.items():
                vector[name] = 1.0 if self.keyword_match(normalized, keywords) else 0.0

        for entity in profile.entities:
            vector[f"entity_{entity.replace(' ', '_')}"] = 1.0
        for name, value in zip(lexicon.TOPICS, profile.topics):
            vector[f"topic_{name}"] = value

        vector["sentiment"] = profile.sentiment
        vector["is_positive"] = 1.0 if profile.sentiment > 0.6 else 0.0
        vector["is_negative"] = 1.0 if profile.sentiment < 0.4 else 0.0
        vector["is_neutral"] = 1.0 if 0.4 <= profile.sentiment <= 0.6 else 0.0
        return vector
