"""Trainable tag classifier.

Maps the fixed-shape feature vector of a question to one probability per
tag in the corpus vocabulary (``tag_<name>`` outputs). The output shape is
derived from the corpus at training time, so retraining on a corpus with a
different tag set produces a differently shaped network.

Concurrency:
    The trained state lives in one immutable :class:`ClassifierModel`
    snapshot. Training builds a new snapshot off to the side and publishes
    it with a single reference assignment under a lock, so a concurrent
    ``predict`` sees either the old model or the new one, never a mix.
    Concurrent ``train`` calls are serialized.

Example:
    >>> classifier = TagClassifier(TrainingConfig(max_iterations=200, seed=1))
    >>> result = classifier.train(entries, extractor)
    >>> sorted(classifier.predict(extractor.feature_vector("halo")))
    ['tag_greeting', 'tag_help']
"""

from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

import numpy as np

from tanya.classifier.augment import AugmentationGenerator
from tanya.classifier.network import FeedForwardNetwork
from tanya.config import TrainingConfig
from tanya.errors import ModelFormatError, TrainingError
from tanya.search import lexicon
from tanya.search.components.features import FEATURE_NAMES, FeatureExtractor
from tanya.search.corpus import unique_tags
from tanya.search.types import CorpusEntry, TrainingResult

logger = logging.getLogger(__name__)

MODEL_FORMAT = "tanya-tag-classifier"
MODEL_VERSION = 1
ETA_DECAY = 0.7


@dataclass(frozen=True)
class ClassifierModel:
    """Immutable trained state: network, vocabulary and run statistics."""

    network: FeedForwardNetwork
    tags: tuple[str, ...]
    feature_names: tuple[str, ...]
    trained_at: str
    stats: Mapping[str, Any] = field(default_factory=dict)

    @property
    def output_names(self) -> tuple[str, ...]:
        return tuple(f"tag_{tag}" for tag in self.tags)

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": MODEL_FORMAT,
            "version": MODEL_VERSION,
            "feature_names": list(self.feature_names),
            "tags": list(self.tags),
            "trained_at": self.trained_at,
            "stats": dict(self.stats),
            **self.network.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClassifierModel":
        """Restore a model exported with :meth:`to_dict`.

        Raises:
            ModelFormatError: If the blob is not a compatible classifier model
        """
        if not isinstance(data, Mapping):
            raise ModelFormatError(f"Model must be a mapping, got {type(data).__name__}")
        if data.get("format") != MODEL_FORMAT:
            raise ModelFormatError(f"Unknown model format: {data.get('format')!r}")
        if data.get("version") != MODEL_VERSION:
            raise ModelFormatError(f"Unsupported model version: {data.get('version')!r}")
        try:
            network = FeedForwardNetwork.from_dict(dict(data))
            tags = tuple(data["tags"])
            feature_names = tuple(data["feature_names"])
        except (KeyError, TypeError, ValueError) as e:
            raise ModelFormatError(f"Corrupt model data: {e}") from e

        if network.output_size != len(tags):
            raise ModelFormatError(
                f"Model has {network.output_size} outputs but {len(tags)} tags"
            )
        if network.input_size != len(feature_names):
            raise ModelFormatError(
                f"Model expects {network.input_size} inputs but lists {len(feature_names)} features"
            )
        return cls(
            network=network,
            tags=tags,
            feature_names=feature_names,
            trained_at=str(data.get("trained_at", "")),
            stats=dict(data.get("stats", {})),
        )


class _EtaTracker:
    """Rolling average of per-iteration wall time."""

    def __init__(self, total: int):
        self.total = total
        self.average: float | None = None

    def update(self, elapsed: float) -> None:
        if self.average is None:
            self.average = elapsed
        else:
            self.average = self.average * ETA_DECAY + elapsed * (1 - ETA_DECAY)

    def remaining(self, iteration: int) -> float:
        return (self.average or 0.0) * max(self.total - iteration, 0)


class TagClassifier:
    """Multi-label tag classifier over engineered text features.

    Args:
        config: Network and training hyperparameters
        threshold: Probability above which a tag is predicted
    """

    def __init__(self, config: TrainingConfig | None = None, threshold: float = 0.5):
        self.config = config or TrainingConfig()
        self.threshold = threshold
        self._model: ClassifierModel | None = None
        self._swap_lock = threading.Lock()
        self._train_lock = threading.Lock()

    @property
    def model(self) -> ClassifierModel | None:
        return self._model

    @property
    def is_trained(self) -> bool:
        return self._model is not None

    @property
    def tags(self) -> tuple[str, ...]:
        model = self._model
        return model.tags if model else ()

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train(
        self,
        entries: Sequence[CorpusEntry],
        extractor: FeatureExtractor,
        progress=None,
    ) -> TrainingResult:
        """Train a fresh network on ``entries`` plus augmented variants.

        Args:
            entries: Corpus to learn from
            extractor: Feature extractor producing classifier inputs
            progress: Optional ``callable(iteration, total, error, eta)``

        Returns:
            TrainingResult describing the run

        Raises:
            TrainingError: If the network cannot be trained; the previous
                model stays active
        """
        with self._train_lock:
            started = time.perf_counter()
            try:
                model, iterations, final_error, augmented = self._fit(entries, extractor, progress)
            except TrainingError:
                raise
            except (ValueError, FloatingPointError, np.linalg.LinAlgError, MemoryError) as e:
                raise TrainingError(f"Training failed: {e}") from e

            elapsed = time.perf_counter() - started
            model = ClassifierModel(
                network=model.network,
                tags=model.tags,
                feature_names=model.feature_names,
                trained_at=model.trained_at,
                stats={
                    "dataset_size": len(entries),
                    "augmented_size": augmented,
                    "training_time": round(elapsed, 4),
                    "iterations": iterations,
                    "final_error": final_error,
                    "timestamp": model.trained_at,
                },
            )
            self.swap(model)

            logger.info(
                f"[TagClassifier] Trained on {len(entries)} entries (+{augmented} augmented), "
                f"{len(model.tags)} tags, {iterations} iterations, error {final_error:.5f}, "
                f"{elapsed:.2f}s"
            )
            return TrainingResult(
                success=True,
                final_error=final_error,
                iterations=iterations,
                dataset_size=len(entries),
                augmented_size=augmented,
                training_time=elapsed,
                tags=model.tags,
            )

    def _fit(self, entries, extractor, progress):
        config = self.config
        tags = unique_tags(entries) or lexicon.FALLBACK_TAGS
        seed = config.seed

        augmented: list[CorpusEntry] = []
        if config.augment and entries:
            generator = AugmentationGenerator(config.augmentation, random.Random(seed))
            augmented = generator.generate(entries)

        samples = list(entries) + augmented
        if not samples:
            raise TrainingError("Cannot train on an empty corpus")

        x = np.array(
            [self._to_array(extractor.feature_vector(e.question), FEATURE_NAMES) for e in samples]
        )
        tag_index = {tag: i for i, tag in enumerate(tags)}
        y = np.zeros((len(samples), len(tags)))
        for row, entry in enumerate(samples):
            for tag in entry.tags:
                y[row, tag_index[tag]] = 1.0

        rng = np.random.default_rng(seed)
        network = FeedForwardNetwork([x.shape[1], *config.hidden_layers, len(tags)], rng=rng)
        eta = _EtaTracker(config.max_iterations)
        batch_size = max(1, config.batch_size)

        logger.info(
            f"[TagClassifier] Training {network.layer_sizes} on {len(samples)} samples "
            f"(max {config.max_iterations} iterations)"
        )

        error = float("inf")
        iteration = 0
        for iteration in range(1, config.max_iterations + 1):
            tick = time.perf_counter()
            order = rng.permutation(len(samples))
            total = 0.0
            for start in range(0, len(samples), batch_size):
                batch = order[start:start + batch_size]
                total += network.train_batch(x[batch], y[batch], config.learning_rate, config.momentum) * len(batch)
            error = total / len(samples)
            eta.update(time.perf_counter() - tick)

            if not np.isfinite(error):
                raise TrainingError(f"Training diverged at iteration {iteration}")

            if config.log_period and iteration % config.log_period == 0:
                remaining = eta.remaining(iteration)
                logger.info(
                    f"[TagClassifier] iteration {iteration}/{config.max_iterations} "
                    f"error {error:.5f} eta {remaining:.1f}s"
                )
                if progress is not None:
                    progress(iteration, config.max_iterations, error, remaining)

            if error < config.error_threshold:
                break
            if iteration > config.early_stop_min_iterations and error < config.early_stop_error:
                logger.info(f"[TagClassifier] Early stop at iteration {iteration} (error {error:.5f})")
                break

        model = ClassifierModel(
            network=network,
            tags=tuple(tags),
            feature_names=FEATURE_NAMES,
            trained_at=datetime.now(timezone.utc).isoformat(),
        )
        return model, iteration, float(error), len(augmented)

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------

    @staticmethod
    def _to_array(features: Mapping[str, float], names: Sequence[str]) -> np.ndarray:
        return np.array([float(features.get(name, 0.0)) for name in names], dtype=np.float64)

    def predict(self, features: Mapping[str, float]) -> dict[str, float]:
        """``{"tag_<name>": probability}``; empty when untrained."""
        model = self._model
        if model is None:
            return {}
        output = model.network.forward(self._to_array(features, model.feature_names))
        return {name: float(p) for name, p in zip(model.output_names, output)}

    def predicted_tags(self, outputs: Mapping[str, float]) -> list[str]:
        tags = [
            name[len("tag_"):] for name, p in outputs.items() if p > self.threshold
        ]
        return sorted(tags) or [lexicon.UNKNOWN_TAG]

    @staticmethod
    def relevance(outputs: Mapping[str, float]) -> float:
        return max(outputs.values(), default=0.0)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def swap(self, model: ClassifierModel | None) -> None:
        with self._swap_lock:
            self._model = model

    def to_dict(self) -> dict[str, Any] | None:
        model = self._model
        return model.to_dict() if model else None

    def load_dict(self, data: Mapping[str, Any]) -> ClassifierModel:
        """Restore and activate a model; the current model is kept on error."""
        model = ClassifierModel.from_dict(data)
        self.swap(model)
        logger.info(f"[TagClassifier] Loaded model with {len(model.tags)} tags ({model.trained_at})")
        return model
