"""Engine configuration.

All empirically chosen constants (ranking thresholds, fuzzy-match ratio,
classifier firing threshold, tier boundary, cache capacities) live here as
fields of frozen dataclasses so they can be tuned without touching the
algorithms. ``EngineConfig.from_env`` builds a config from ``TANYA_*``
environment variables.

Example:
    >>> from tanya.config import EngineConfig
    >>> config = EngineConfig(short_query_threshold=0.25)
    >>> config.threshold_for(word_count=8)
    0.18
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path


DEFAULT_DATASET_PATH = "./data/dataset.json"
DEFAULT_MODEL_PATH = "./models/brain-model.json"


def parse_bool(value: str) -> bool:
    """Parse boolean from environment variable."""
    return value.lower() in ("true", "1", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    return int(raw) if raw not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    return float(raw) if raw not in (None, "") else default


@dataclass(frozen=True)
class AugmentationConfig:
    """Bounds for synthetic training-example generation."""

    max_samples: int = 300
    limited_mode_threshold: int = 10_000
    limited_hard_cap: int = 200
    max_typo_variants: int = 3
    high_value_categories: tuple[str, ...] = (
        "greeting",
        "price_inquiry",
        "payment",
        "help",
        "technical",
        "refund",
        "account",
        "subscription",
        "problem",
    )


@dataclass(frozen=True)
class TrainingConfig:
    """Hyperparameters for the tag classifier network."""

    hidden_layers: tuple[int, ...] = (24, 16, 8)
    learning_rate: float = 0.1
    momentum: float = 0.8
    max_iterations: int = 5000
    error_threshold: float = 0.003
    early_stop_min_iterations: int = 500
    early_stop_error: float = 0.008
    log_period: int = 100
    batch_size: int = 32
    seed: int | None = None
    augment: bool = True
    augmentation: AugmentationConfig = field(default_factory=AugmentationConfig)


@dataclass(frozen=True)
class EngineConfig:
    """Tunables for scoring, ranking and caching."""

    # Ranking
    short_query_threshold: float = 0.22
    long_query_threshold: float = 0.18
    long_query_words: int = 5
    stemmed_escape: float = 0.35
    semantic_escape: float = 0.4
    confidence_floor: float = 0.1
    top_n: int = 5

    # Matching
    fuzzy_threshold: float = 0.8
    partial_match_threshold: float = 0.85
    classifier_threshold: float = 0.5
    large_corpus_threshold: int = 20_000
    rolling_distance_min_length: int = 100

    # Tags
    high_confidence: float = 0.8
    low_confidence: float = 0.4
    match_tag_min_weight: float = 0.6

    # Caches
    similarity_cache_size: int = 1000
    semantic_cache_size: int = 500
    context_cache_size: int = 300
    vector_cache_size: int = 10_000
    distance_cache_size: int = 500
    cache_enabled: bool = True

    # Scoring fan-out; 0 disables the thread pool
    parallel_threshold: int = 0
    max_workers: int = 4

    dataset_path: Path = Path(DEFAULT_DATASET_PATH)
    model_path: Path = Path(DEFAULT_MODEL_PATH)
    training: TrainingConfig = field(default_factory=TrainingConfig)

    def threshold_for(self, word_count: int) -> float:
        """Combined-score cutoff for a query with ``word_count`` words."""
        if word_count > self.long_query_words:
            return self.long_query_threshold
        return self.short_query_threshold

    def with_overrides(self, **changes) -> "EngineConfig":
        return replace(self, **changes)

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from ``TANYA_*`` environment variables."""
        defaults = cls()
        training_defaults = defaults.training
        seed_raw = os.environ.get("TANYA_SEED")
        training = replace(
            training_defaults,
            learning_rate=_env_float("TANYA_LEARNING_RATE", training_defaults.learning_rate),
            momentum=_env_float("TANYA_MOMENTUM", training_defaults.momentum),
            max_iterations=_env_int("TANYA_MAX_ITERATIONS", training_defaults.max_iterations),
            log_period=_env_int("TANYA_LOG_PERIOD", training_defaults.log_period),
            seed=int(seed_raw) if seed_raw else training_defaults.seed,
            augment=parse_bool(os.environ.get("TANYA_AUGMENT", "true")),
        )
        return cls(
            short_query_threshold=_env_float("TANYA_SHORT_QUERY_THRESHOLD", defaults.short_query_threshold),
            long_query_threshold=_env_float("TANYA_LONG_QUERY_THRESHOLD", defaults.long_query_threshold),
            confidence_floor=_env_float("TANYA_CONFIDENCE_FLOOR", defaults.confidence_floor),
            fuzzy_threshold=_env_float("TANYA_FUZZY_THRESHOLD", defaults.fuzzy_threshold),
            classifier_threshold=_env_float("TANYA_CLASSIFIER_THRESHOLD", defaults.classifier_threshold),
            large_corpus_threshold=_env_int("TANYA_LARGE_CORPUS_THRESHOLD", defaults.large_corpus_threshold),
            cache_enabled=parse_bool(os.environ.get("TANYA_CACHE_ENABLED", "true")),
            parallel_threshold=_env_int("TANYA_PARALLEL_THRESHOLD", defaults.parallel_threshold),
            max_workers=_env_int("TANYA_MAX_WORKERS", defaults.max_workers),
            dataset_path=Path(os.getenv("TANYA_DATASET_PATH", DEFAULT_DATASET_PATH)),
            model_path=Path(os.getenv("TANYA_MODEL_PATH", DEFAULT_MODEL_PATH)),
            training=training,
        )
