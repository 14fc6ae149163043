"""QAEngine: corpus-backed question matching with a trainable tag classifier.

This module ties the components together:

- corpus loading and tier selection (compact vs. large corpus)
- per-entry profile precomputation
- ranking (similarity engine + relevance ranker)
- tag prediction (classifier) and tag aggregation
- answer selection with intent-based fallback
- classifier training, export/import and file persistence

State handling:
    Everything derived from the corpus (entries, profiles, tier strategy,
    caches) lives in one immutable ``_CorpusIndex``. Loading a corpus builds
    a complete new index and publishes it with a single assignment, so a
    failed load leaves the previous index untouched and a concurrent query
    always sees one consistent corpus.

Example:
    >>> from tanya.search.engine import QAEngine
    >>> engine = QAEngine()
    >>> engine.load_corpus([{"question": "Selamat pagi", "answer": "Pagi juga!", "tags": ["greeting"]}])
    >>> result = engine.score("selamat pagi")
    >>> result.best.score.combined
    1.0
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

from tanya.classifier.model import TagClassifier
from tanya.classifier.store import ModelStore
from tanya.config import EngineConfig
from tanya.errors import ModelFormatError, ScoringError, TrainingError
from tanya.search import lexicon
from tanya.search.components.features import FeatureExtractor, TextProfile
from tanya.search.components.ranker import RelevanceRanker
from tanya.search.components.responder import FallbackResponder
from tanya.search.components.similarity import SimilarityEngine
from tanya.search.components.tagger import TagAggregator
from tanya.search.corpus import CorpusSource, load_corpus, unique_tags
from tanya.search.strategy import TierStrategy, select_strategy
from tanya.search.types import Answer, CorpusEntry, ScoreResult, TrainingResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _CorpusIndex:
    entries: tuple[CorpusEntry, ...]
    profiles: tuple[TextProfile, ...]
    strategy: TierStrategy
    extractor: FeatureExtractor
    similarity: SimilarityEngine
    ranker: RelevanceRanker


class QAEngine:
    """Question-answer matching engine.

    Args:
        config: Engine configuration; ``EngineConfig()`` if omitted
        classifier: Tag classifier; a fresh untrained one if omitted
        store: Model store used by ``save_model``/``initialize``;
            defaults to ``config.model_path``
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        classifier: TagClassifier | None = None,
        store: ModelStore | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.classifier = classifier or TagClassifier(
            self.config.training, threshold=self.config.classifier_threshold
        )
        self.store = store or ModelStore(self.config.model_path)
        self.tagger = TagAggregator(self.config)
        self.responder = FallbackResponder()
        self._index_lock = threading.Lock()
        self._index = self._build_index(())
        self._executor: ThreadPoolExecutor | None = None
        self._last_training: TrainingResult | None = None

        logger.debug(f"[QAEngine] Initialized with config={self.config}")

    # ------------------------------------------------------------------
    # Corpus
    # ------------------------------------------------------------------

    @property
    def corpus(self) -> tuple[CorpusEntry, ...]:
        return self._index.entries

    @property
    def strategy(self) -> TierStrategy:
        return self._index.strategy

    def _build_index(self, entries: Sequence[CorpusEntry]) -> _CorpusIndex:
        strategy = select_strategy(len(entries), self.config)
        extractor = FeatureExtractor(self.config, strategy)
        similarity = SimilarityEngine(self.config, strategy, extractor)
        profiles = tuple(extractor.profile(entry.question) for entry in entries)
        return _CorpusIndex(
            entries=tuple(entries),
            profiles=profiles,
            strategy=strategy,
            extractor=extractor,
            similarity=similarity,
            ranker=RelevanceRanker(self.config, similarity),
        )

    def load_corpus(self, source: CorpusSource) -> tuple[CorpusEntry, ...]:
        """Replace the corpus.

        Args:
            source: JSON file path (falls back to the default corpus when
                unreadable), an iterable of records/entries, or None for
                the default corpus

        Returns:
            The loaded entries

        Raises:
            DataError: If in-memory records are invalid; the previous corpus
                stays active
        """
        entries = load_corpus(source)
        index = self._build_index(entries)
        with self._index_lock:
            self._index = index
        logger.info(
            f"[QAEngine] Corpus loaded: {len(entries)} entries, "
            f"{len(unique_tags(entries))} tags, {index.strategy.tier.value} tier"
        )
        return entries

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _empty_result(self, query: Any) -> ScoreResult:
        return ScoreResult(
            query=query if isinstance(query, str) else "",
            normalized="",
            matches=(),
            confidence=0.0,
            tags=(lexicon.UNKNOWN_TAG,),
        )

    def score(self, query: str) -> ScoreResult:
        """Rank the corpus against ``query`` and tag the query.

        Never raises for bad queries: a non-string query yields a
        zero-relevance result.
        """
        if not isinstance(query, str):
            error = ScoringError(f"Query must be str, got {type(query).__name__}")
            logger.warning(f"[QAEngine] {error}")
            return self._empty_result(query)

        index = self._index
        profile = index.extractor.profile(query)
        matches = index.ranker.rank(profile, index.entries, index.profiles)
        confidence = matches[0].score.combined if matches else 0.0
        reliable = bool(matches) and confidence >= self.config.confidence_floor

        outputs = self.classifier.predict(index.extractor.feature_vector(query))
        predicted = self.classifier.predicted_tags(outputs)
        relevance = self.classifier.relevance(outputs)

        tags = self.tagger.aggregate(profile, matches, predicted, relevance, reliable)
        logger.debug(
            f"[QAEngine] query={query!r} matches={len(matches)} "
            f"confidence={confidence:.3f} reliable={reliable} tags={list(tags)}"
        )
        return ScoreResult(
            query=query,
            normalized=profile.normalized,
            matches=matches,
            confidence=confidence,
            tags=tags,
            intent=profile.intent,
            relevance=relevance,
            predicted_tags=tuple(predicted),
            reliable=reliable,
        )

    def find_answer(self, query: str) -> Answer:
        """Best stored answer for ``query``, or an intent-based fallback reply."""
        result = self.score(query)
        if result.reliable and result.best is not None:
            best = result.best
            category = best.entry.category or (sorted(best.entry.tags)[0] if best.entry.tags else "general")
            return Answer(
                text=self.responder.wrap(best, result.confidence, category),
                confidence=result.confidence,
                tags=result.tags,
                source="corpus",
                category=category,
                matches=result.matches,
                intent=result.intent,
            )

        category, text = self.responder.fallback(result.intent, len(result.normalized.split()))
        logger.info(f"[QAEngine] No reliable match for {query!r}; fallback category={category}")
        return Answer(
            text=text,
            confidence=result.confidence,
            tags=result.tags,
            source="fallback",
            category=category,
            matches=result.matches,
            intent=result.intent,
        )

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train(self, corpus: CorpusSource = None, progress=None) -> TrainingResult:
        """Train the tag classifier.

        Args:
            corpus: Optional replacement corpus; loaded before training.
                When omitted the current corpus is used.
            progress: Optional ``callable(iteration, total, error, eta)``

        Raises:
            TrainingError: If training fails; the previous model stays active
            DataError: If ``corpus`` is invalid
        """
        if corpus is not None:
            self.load_corpus(corpus)
        index = self._index
        try:
            result = self.classifier.train(index.entries, index.extractor, progress=progress)
        except TrainingError as e:
            logger.error(f"[QAEngine] Training failed, keeping previous model: {e}")
            raise
        self._last_training = result
        return result

    def train_async(self, corpus: CorpusSource | None = None, progress=None) -> Future:
        """Run :meth:`train` on a background worker thread."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tanya-train")
        return self._executor.submit(self.train, corpus, progress)

    # ------------------------------------------------------------------
    # Model persistence
    # ------------------------------------------------------------------

    def export_model(self) -> dict[str, Any] | None:
        """Plain-dict classifier state, or None if no model is trained."""
        return self.classifier.to_dict()

    def import_model(self, blob: Mapping[str, Any]) -> None:
        """Activate a model produced by :meth:`export_model`.

        Raises:
            ModelFormatError: If ``blob`` is not a compatible model
        """
        self.classifier.load_dict(blob)

    def save_model(self) -> Path:
        blob = self.export_model()
        if blob is None:
            raise TrainingError("No trained model to save")
        return self.store.save(blob, dataset_size=len(self.corpus))

    def initialize(self, dataset: CorpusSource = None, retrain: bool = False) -> None:
        """Startup sequence: load corpus, then load the stored model or train one."""
        self.load_corpus(dataset if dataset is not None else self.config.dataset_path)
        if not retrain:
            try:
                blob = self.store.load()
            except ModelFormatError as e:
                logger.warning(f"[QAEngine] Ignoring unreadable model: {e}")
                blob = None
            if blob is not None:
                try:
                    self.import_model(blob)
                    return
                except ModelFormatError as e:
                    logger.warning(f"[QAEngine] Stored model incompatible, retraining: {e}")
        self.train()
        self.save_model()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def stats(self) -> dict[str, Any]:
        index = self._index
        model = self.classifier.model
        return {
            "corpus_size": len(index.entries),
            "tier": index.strategy.tier.value,
            "tags": list(unique_tags(index.entries)),
            "model_trained": model is not None,
            "model_tags": list(model.tags) if model else [],
            "model_stats": dict(model.stats) if model else {},
            "caches": [
                {"name": s.name, "size": s.size, "capacity": s.capacity, "hits": s.hits, "misses": s.misses}
                for s in index.similarity.cache_stats()
            ],
        }

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "QAEngine":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
