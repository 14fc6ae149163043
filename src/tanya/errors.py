"""Exception hierarchy for the question-matching engine."""

from __future__ import annotations


class TanyaError(Exception):
    """Base class for all engine errors."""


class DataError(TanyaError):
    """Corpus is missing, unreadable or structurally invalid."""


class ModelFormatError(DataError):
    """A serialized classifier model cannot be restored."""


class TrainingError(TanyaError):
    """Classifier training failed; the previously loaded model is kept."""


class ScoringError(TanyaError):
    """Scoring a query against one corpus entry failed."""

    def __init__(self, message: str, entry_index: int | None = None):
        super().__init__(message)
        self.entry_index = entry_index
