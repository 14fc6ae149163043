"""Relevance ranking of corpus entries against a query.

Scores every entry, keeps those passing a word-count dependent threshold
on ``combined`` (or an escape on very high stemmed/semantic similarity),
sorts descending and truncates to ``top_n``.

A failure while scoring one entry is logged and that entry is skipped;
it never aborts the pass.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from tanya.config import EngineConfig
from tanya.errors import ScoringError
from tanya.search.components.features import TextProfile
from tanya.search.components.similarity import SimilarityEngine
from tanya.search.types import CorpusEntry, RankedMatch, SimilarityScore

logger = logging.getLogger(__name__)


class RelevanceRanker:
    """Filters, sorts and truncates scored corpus entries.

    Args:
        config: Thresholds, ``top_n`` and the thread fan-out settings
        similarity: Similarity engine for the loaded corpus

    Example:
        >>> ranker = RelevanceRanker(config, similarity)
        >>> matches = ranker.rank(query_profile, entries, profiles)
        >>> len(matches) <= config.top_n
        True
    """

    def __init__(self, config: EngineConfig, similarity: SimilarityEngine):
        self.config = config
        self.similarity = similarity

    def threshold(self, query: TextProfile) -> float:
        return self.config.threshold_for(len(query.words))

    def passes(self, score: SimilarityScore, threshold: float) -> bool:
        """True when ``score`` clears ``threshold`` or an escape condition."""
        return (
            score.combined > threshold
            or score.stemmed > self.config.stemmed_escape
            or score.semantic > self.config.semantic_escape
        )

    def rank(
        self,
        query: TextProfile,
        entries: Sequence[CorpusEntry],
        profiles: Sequence[TextProfile],
    ) -> tuple[RankedMatch, ...]:
        """Rank ``entries`` (with their precomputed ``profiles``) for ``query``.

        Returns:
            At most ``config.top_n`` matches, best first, ranks 1-based.
        """
        if len(entries) != len(profiles):
            raise ValueError(
                f"entries and profiles differ in length: {len(entries)} != {len(profiles)}"
            )
        if not entries:
            return ()

        threshold = self.threshold(query)
        scored = self._score_all(query, profiles)

        passing = [
            (index, score) for index, score in scored
            if score is not None and self.passes(score, threshold)
        ]
        # Stable: ties keep corpus order.
        passing.sort(key=lambda item: item[1].combined, reverse=True)

        matches = tuple(
            RankedMatch(entry=entries[index], score=score, rank=rank, index=index)
            for rank, (index, score) in enumerate(passing[: self.config.top_n], start=1)
        )
        logger.debug(
            f"[RelevanceRanker] {len(passing)}/{len(entries)} entries passed "
            f"threshold {threshold:.2f}; returning {len(matches)}"
        )
        return matches

    def _score_all(
        self, query: TextProfile, profiles: Sequence[TextProfile]
    ) -> list[tuple[int, SimilarityScore | None]]:
        parallel = self.config.parallel_threshold
        if parallel and len(profiles) >= parallel:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                scores = list(
                    executor.map(lambda item: self._score_one(query, *item), enumerate(profiles))
                )
        else:
            scores = [self._score_one(query, index, profile) for index, profile in enumerate(profiles)]
        return list(enumerate(scores))

    def _score_one(self, query: TextProfile, index: int, profile: TextProfile) -> SimilarityScore | None:
        try:
            return self.similarity.score(query, profile)
        except Exception as e:
            error = ScoringError(f"Failed to score entry {index}: {e}", entry_index=index)
            logger.warning(f"[RelevanceRanker] {error}")
            return None
