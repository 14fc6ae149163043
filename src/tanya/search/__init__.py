"""Question matching: corpus, scoring types, tier strategy and caches."""

from tanya.search.cache import BoundedCache, CacheStats
from tanya.search.corpus import DEFAULT_CORPUS, load_corpus, read_corpus_file, validate_entries
from tanya.search.strategy import CorpusTier, TierStrategy, select_strategy
from tanya.search.types import (
    Answer,
    CorpusEntry,
    RankedMatch,
    ScoreResult,
    SimilarityScore,
    TrainingResult,
)

__all__ = [
    "Answer",
    "BoundedCache",
    "CacheStats",
    "CorpusEntry",
    "CorpusTier",
    "DEFAULT_CORPUS",
    "RankedMatch",
    "ScoreResult",
    "SimilarityScore",
    "TierStrategy",
    "TrainingResult",
    "load_corpus",
    "read_corpus_file",
    "select_strategy",
    "validate_entries",
]
