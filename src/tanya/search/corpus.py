"""Corpus loading and validation.

A corpus file is a JSON array of ``{"question", "answer", "tags"}``
objects (``tags`` may be a single string or a list; ``category`` is
optional). Entries are validated with pydantic and converted into frozen
:class:`CorpusEntry` values.

Two failure policies:

- ``read_corpus_file`` raises :class:`DataError` for a missing or
  malformed file.
- ``load_corpus`` catches that and returns the built-in default corpus so a
  service can still start; invalid in-memory entries passed directly are a
  programming error and raise.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from tanya.errors import DataError
from tanya.search.types import CorpusEntry

logger = logging.getLogger(__name__)

CorpusSource = Union[str, Path, Iterable[Union[Mapping[str, Any], CorpusEntry]], None]


class CorpusEntryModel(BaseModel):
    """Validation schema for one corpus record."""
    question: str = Field(..., min_length=1, description="Question text")
    answer: Union[str, dict[str, Any]] = Field(..., description="Answer text or structured payload")
    tags: list[str] = Field(default_factory=list, description="Tag or list of tags")
    category: str | None = Field(default=None, description="Optional category label")

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("question")
    @classmethod
    def _non_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question must not be blank")
        return value

    def to_entry(self) -> CorpusEntry:
        tags = frozenset(tag.strip() for tag in self.tags if tag and tag.strip())
        return CorpusEntry(
            question=self.question,
            answer=self.answer,
            tags=tags,
            category=self.category,
        )


DEFAULT_CORPUS: tuple[CorpusEntry, ...] = (
    CorpusEntry("Hi, good morning!", "Good morning! How can I help you today?", frozenset({"greeting"})),
    CorpusEntry(
        "How much does this product cost?",
        "Prices depend on the product and plan. Which product are you interested in?",
        frozenset({"price_inquiry"}),
    ),
    CorpusEntry(
        "Is this item still available?",
        "Let me check the stock for you. Which item are you looking for?",
        frozenset({"available"}),
    ),
    CorpusEntry("I need help", "Of course. What do you need help with?", frozenset({"help"})),
)


def validate_entries(records: Iterable[Mapping[str, Any] | CorpusEntry]) -> tuple[CorpusEntry, ...]:
    """Validate raw records into corpus entries.

    Raises:
        DataError: If the input is not a list of records or any record is invalid
    """
    if isinstance(records, (str, bytes, Mapping)):
        raise DataError(f"Corpus must be a list of entries, got {type(records).__name__}")

    entries: list[CorpusEntry] = []
    errors: list[str] = []
    for index, record in enumerate(records):
        if isinstance(record, CorpusEntry):
            # Built entries go through the same schema as raw records.
            record = {
                "question": record.question,
                "answer": record.answer,
                "tags": record.tags,
                "category": record.category,
            }
        elif not isinstance(record, Mapping):
            errors.append(f"Item {index}: expected object, got {type(record).__name__}")
            continue
        try:
            entries.append(CorpusEntryModel.model_validate(dict(record)).to_entry())
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            errors.append(f"Item {index}: {details}")

    if errors:
        preview = "\n  ".join(errors[:10])
        more = f"\n  ... and {len(errors) - 10} more" if len(errors) > 10 else ""
        raise DataError(f"Invalid corpus ({len(errors)} bad entries):\n  {preview}{more}")
    return tuple(entries)


def read_corpus_file(path: str | Path) -> tuple[CorpusEntry, ...]:
    """Read and validate a JSON corpus file.

    Raises:
        DataError: If the file is missing, not JSON, or contains invalid entries
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise DataError(f"Corpus file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise DataError(f"Cannot read corpus file {path}: {e}") from e

    if not isinstance(raw, list):
        raise DataError(f"Corpus file {path} must contain a JSON array")
    return validate_entries(raw)


def load_corpus(source: CorpusSource) -> tuple[CorpusEntry, ...]:
    """Load a corpus from a path or from in-memory records.

    File problems fall back to :data:`DEFAULT_CORPUS` with a warning. In-memory
    records are validated strictly and raise :class:`DataError` when invalid.

    Args:
        source: Path to a JSON file, an iterable of records/entries, or None
            for the default corpus

    Returns:
        Tuple of validated corpus entries
    """
    if source is None:
        logger.info(f"[Corpus] No source given, using default corpus ({len(DEFAULT_CORPUS)} entries)")
        return DEFAULT_CORPUS

    if isinstance(source, (str, Path)):
        try:
            entries = read_corpus_file(source)
        except DataError as e:
            logger.warning(f"[Corpus] {e}; falling back to default corpus")
            return DEFAULT_CORPUS
        logger.info(f"[Corpus] Loaded {len(entries)} entries from {source}")
        return entries

    return validate_entries(source)


def unique_tags(entries: Iterable[CorpusEntry]) -> tuple[str, ...]:
    """Sorted tag vocabulary of ``entries``."""
    tags: set[str] = set()
    for entry in entries:
        tags.update(entry.tags)
    return tuple(sorted(tags))
