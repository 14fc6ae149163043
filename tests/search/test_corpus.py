"""Tests for corpus loading, bounded caches and tier selection."""

import json

import pytest


class TestCorpusLoading:
    """Tests for corpus validation and loading."""

    def test_tags_coerced(self, sample_records):
        """String tags become one-element tag sets."""
        from tanya.search.corpus import validate_entries

        entries = validate_entries(sample_records)
        assert len(entries) == len(sample_records)
        assert entries[3].tags == frozenset({"help"})

    def test_invalid_records_raise(self):
        """Missing or blank questions raise DataError listing the bad items."""
        from tanya.errors import DataError
        from tanya.search.corpus import validate_entries

        with pytest.raises(DataError, match="Item 1"):
            validate_entries([
                {"question": "halo", "answer": "hai"},
                {"question": "   ", "answer": "hai"},
            ])
        with pytest.raises(DataError):
            validate_entries({"question": "halo"})

    def test_built_entries_are_validated(self):
        """Pre-built entries with a missing question or bad tags raise DataError."""
        from tanya.errors import DataError
        from tanya.search.corpus import validate_entries
        from tanya.search.types import CorpusEntry

        good = CorpusEntry("halo", "hai", frozenset({" greeting "}))
        assert validate_entries([good])[0].tags == frozenset({"greeting"})

        with pytest.raises(DataError, match="Item 1"):
            validate_entries([good, CorpusEntry(None, "hai")])
        with pytest.raises(DataError, match="Item 0"):
            validate_entries([CorpusEntry("halo", "hai", frozenset({3}))])

    def test_missing_file_falls_back(self, tmp_path):
        """An unreadable dataset path loads the default corpus."""
        from tanya.search.corpus import DEFAULT_CORPUS, load_corpus

        assert load_corpus(tmp_path / "missing.json") == DEFAULT_CORPUS
        assert load_corpus(None) == DEFAULT_CORPUS

    def test_malformed_file_falls_back(self, tmp_path):
        """A file that is not a JSON array loads the default corpus."""
        from tanya.search.corpus import DEFAULT_CORPUS, load_corpus

        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"question": "halo"}), encoding="utf-8")
        assert load_corpus(path) == DEFAULT_CORPUS

    def test_read_file(self, tmp_path, sample_records):
        """A valid JSON file loads every entry."""
        from tanya.search.corpus import read_corpus_file

        path = tmp_path / "dataset.json"
        path.write_text(json.dumps(sample_records), encoding="utf-8")
        assert len(read_corpus_file(path)) == len(sample_records)

    def test_bundled_dataset(self, dataset_path):
        """The bundled dataset validates with its seven tags."""
        from tanya.search.corpus import read_corpus_file, unique_tags

        entries = read_corpus_file(dataset_path)
        assert len(entries) == 15
        assert unique_tags(entries) == (
            "available", "goodbye", "greeting", "help", "payment", "price_inquiry", "unknown",
        )

    def test_structured_answer_text(self):
        """Mapping answers expose their text field."""
        from tanya.search.types import CorpusEntry

        entry = CorpusEntry("halo", {"text": "Hai!", "lang": "id"}, frozenset())
        assert entry.answer_text == "Hai!"


class TestBoundedCache:
    """Tests for BoundedCache."""

    def test_rejects_when_full(self):
        """A full cache keeps its entries and rejects new keys."""
        from tanya.search.cache import BoundedCache

        cache = BoundedCache("test", capacity=2)
        assert cache.put("a", 1)
        assert cache.put("b", 2)
        assert not cache.put("c", 3)
        assert len(cache) == 2
        assert "c" not in cache
        assert cache.stats().rejected == 1

    def test_get_or_compute_counts(self):
        """Hits and misses are counted."""
        from tanya.search.cache import BoundedCache

        cache = BoundedCache("test", capacity=10)
        calls = []
        for _ in range(3):
            cache.get_or_compute("k", lambda: calls.append(1) or 0.5)
        assert len(calls) == 1
        stats = cache.stats()
        assert (stats.hits, stats.misses) == (2, 1)

    def test_disabled_always_computes(self):
        """A disabled cache stores nothing."""
        from tanya.search.cache import BoundedCache

        cache = BoundedCache("test", capacity=10, enabled=False)
        assert cache.get_or_compute("k", lambda: 1) == 1
        assert len(cache) == 0

    def test_negative_capacity(self):
        """Negative capacity is rejected."""
        from tanya.search.cache import BoundedCache

        with pytest.raises(ValueError):
            BoundedCache("test", capacity=-1)


class TestTierStrategy:
    """Tests for tier selection."""

    def test_threshold(self):
        """Corpora above the configured size use the large tier."""
        from tanya.config import EngineConfig
        from tanya.search.strategy import CorpusTier, select_strategy

        config = EngineConfig(large_corpus_threshold=10)
        assert select_strategy(10, config).tier is CorpusTier.COMPACT
        assert select_strategy(11, config).tier is CorpusTier.LARGE

    def test_weights_sum_to_one(self):
        """Combined weights of both tiers sum to one."""
        from tanya.search.strategy import COMPACT, LARGE

        for strategy in (COMPACT, LARGE):
            w = strategy.combined
            assert w.exact + w.stemmed + w.semantic + w.contextual == pytest.approx(1.0)

    def test_large_tier_disables_fuzzy_keywords(self):
        """The large tier matches keywords exactly."""
        from tanya.search.strategy import COMPACT, LARGE

        assert COMPACT.fuzzy_keywords
        assert not LARGE.fuzzy_keywords
        assert LARGE.is_large and not COMPACT.is_large
