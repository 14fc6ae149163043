"""Corpus-size tier selection.

Scoring trades accuracy for speed once the corpus grows past
``EngineConfig.large_corpus_threshold``. Rather than branching on corpus
size inside every method, the engine picks a :class:`TierStrategy` once at
corpus-load time and passes it to the components.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from tanya.config import EngineConfig
from tanya.search import lexicon

logger = logging.getLogger(__name__)


class CorpusTier(str, Enum):
    COMPACT = "compact"
    LARGE = "large"


@dataclass(frozen=True)
class OverlapWeights:
    jaccard: float
    fuzzy: float
    char: float
    keyword: float
    ngram: float


@dataclass(frozen=True)
class SemanticWeights:
    intent: float
    pattern: float
    entity: float
    context: float
    sentiment: float


@dataclass(frozen=True)
class CombinedWeights:
    exact: float
    stemmed: float
    semantic: float
    contextual: float


@dataclass(frozen=True)
class TierStrategy:
    tier: CorpusTier
    overlap: OverlapWeights
    semantic: SemanticWeights
    combined: CombinedWeights
    fuzzy_keywords: bool
    fast_word_distance: bool
    max_fuzzy_words: int | None
    max_fuzzy_candidates: int | None
    important_keywords: frozenset[str]
    context_topics: tuple[str, ...]
    topic_keyword_limit: int | None
    # Texts at least this long skip n-gram/pattern/context work on LARGE.
    long_text_length: int | None

    @property
    def is_large(self) -> bool:
        return self.tier is CorpusTier.LARGE


COMPACT = TierStrategy(
    tier=CorpusTier.COMPACT,
    overlap=OverlapWeights(jaccard=0.30, fuzzy=0.25, char=0.15, keyword=0.20, ngram=0.10),
    semantic=SemanticWeights(intent=0.35, pattern=0.25, entity=0.20, context=0.15, sentiment=0.05),
    combined=CombinedWeights(exact=0.30, stemmed=0.40, semantic=0.20, contextual=0.10),
    fuzzy_keywords=True,
    fast_word_distance=False,
    max_fuzzy_words=None,
    max_fuzzy_candidates=None,
    important_keywords=lexicon.IMPORTANT_KEYWORDS,
    context_topics=tuple(lexicon.TOPICS),
    topic_keyword_limit=None,
    long_text_length=None,
)

LARGE = TierStrategy(
    tier=CorpusTier.LARGE,
    overlap=OverlapWeights(jaccard=0.40, fuzzy=0.30, char=0.10, keyword=0.20, ngram=0.0),
    semantic=SemanticWeights(intent=0.40, pattern=0.30, entity=0.20, context=0.10, sentiment=0.0),
    combined=CombinedWeights(exact=0.35, stemmed=0.45, semantic=0.15, contextual=0.05),
    fuzzy_keywords=False,
    fast_word_distance=True,
    max_fuzzy_words=10,
    max_fuzzy_candidates=5,
    important_keywords=lexicon.FAST_IMPORTANT_KEYWORDS,
    context_topics=lexicon.FAST_TOPICS,
    topic_keyword_limit=lexicon.FAST_TOPIC_KEYWORDS,
    long_text_length=100,
)


def select_strategy(corpus_size: int, config: EngineConfig) -> TierStrategy:
    """Pick the scoring tier for a corpus of ``corpus_size`` entries."""
    strategy = LARGE if corpus_size > config.large_corpus_threshold else COMPACT
    logger.info(f"[TierStrategy] {corpus_size} entries -> {strategy.tier.value} tier")
    return strategy
