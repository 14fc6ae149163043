"""Immutable value types for the matching pipeline.

Transformation chain:
    CorpusEntry → SimilarityScore → RankedMatch → ScoreResult → Answer

Every type is a frozen dataclass; results are shared across threads and
stored in caches as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping


@dataclass(frozen=True)
class CorpusEntry:
    """One curated question/answer pair.

    ``answer`` is usually a string; structured payloads (mappings) are kept
    as-is and unwrapped by the responder.
    """

    question: str
    answer: Any
    tags: frozenset[str] = field(default_factory=frozenset)
    category: str | None = None

    @property
    def answer_text(self) -> str:
        if isinstance(self.answer, Mapping):
            for key in ("text", "answer", "message"):
                value = self.answer.get(key)
                if isinstance(value, str):
                    return value
            return str(dict(self.answer))
        return str(self.answer)


@dataclass(frozen=True)
class SimilarityScore:
    """Per-signal similarity between a query and one corpus entry."""

    exact: float
    stemmed: float
    semantic: float
    contextual: float
    combined: float

    @classmethod
    def identical(cls) -> "SimilarityScore":
        return cls(1.0, 1.0, 1.0, 1.0, 1.0)


@dataclass(frozen=True)
class RankedMatch:
    """A corpus entry with its score and 1-based rank."""

    entry: CorpusEntry
    score: SimilarityScore
    rank: int
    index: int = -1  # position in the loaded corpus


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of scoring one query against the corpus."""

    query: str
    normalized: str
    matches: tuple[RankedMatch, ...]
    confidence: float
    tags: tuple[str, ...]
    intent: str = "general"
    relevance: float = 0.0
    predicted_tags: tuple[str, ...] = ("unknown",)
    reliable: bool = False

    @property
    def best(self) -> RankedMatch | None:
        return self.matches[0] if self.matches else None


@dataclass(frozen=True)
class Answer:
    """Answer selected (or generated from a fallback category) for a query."""

    text: str
    confidence: float
    tags: tuple[str, ...]
    source: Literal["corpus", "fallback"]
    category: str
    matches: tuple[RankedMatch, ...] = field(default_factory=tuple)
    intent: str = "general"


@dataclass(frozen=True)
class TrainingResult:
    """Summary of one classifier training run."""

    success: bool
    final_error: float | None
    iterations: int
    dataset_size: int
    augmented_size: int = 0
    training_time: float = 0.0
    tags: tuple[str, ...] = field(default_factory=tuple)
    error: str | None = None
