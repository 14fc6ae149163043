"""Tests for QAEngine."""

import pytest


class TestScoring:
    """Tests for QAEngine.score and find_answer."""

    def test_exact_question_matches(self, engine_config):
        """A query equal to a stored question matches it with full confidence."""
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        engine.load_corpus([
            {"question": "Selamat pagi", "answer": "Pagi juga!", "tags": ["greeting"]},
            {"question": "Berapa harga produk premium ini?", "answer": "Mulai 50 ribu.", "tags": ["price_inquiry"]},
        ])
        result = engine.score("selamat pagi")

        assert result.best.entry.question == "Selamat pagi"
        assert result.best.score.combined >= 0.8
        assert result.confidence == result.best.score.combined
        assert result.reliable
        assert "greeting" in result.tags

    def test_empty_corpus(self, engine_config):
        """An empty corpus yields no matches, zero confidence and some tags."""
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        engine.load_corpus([])
        result = engine.score("berapa harga paket premium?")

        assert result.matches == ()
        assert result.confidence == 0.0
        assert not result.reliable
        assert result.tags
        assert "price_inquiry" in result.tags

    def test_non_string_query(self, engine_config, sample_records):
        """A non-string query degrades to an unknown, zero-confidence result."""
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        engine.load_corpus(sample_records)
        result = engine.score(None)

        assert result.matches == ()
        assert result.confidence == 0.0
        assert result.tags == ("unknown",)

    def test_at_most_five_matches(self, engine_config, dataset_path):
        """Scoring never returns more than five matches."""
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        engine.load_corpus(dataset_path)
        for query in ["saya butuh bantuan pesanan", "pembayaran saya bermasalah", "halo"]:
            result = engine.score(query)
            assert len(result.matches) <= 5
            assert result.tags == tuple(sorted(result.tags))

    def test_find_answer_from_corpus(self, engine_config, sample_records):
        """A strong match returns the stored answer."""
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        engine.load_corpus(sample_records)
        answer = engine.find_answer("Selamat pagi, saya ingin bertanya")

        assert answer.source == "corpus"
        assert answer.text == "Selamat pagi! Ada yang bisa saya bantu?"
        assert answer.category == "greeting"

    def test_find_answer_carries_scoring(self, engine_config, sample_records):
        """The answer exposes the intent and matches of its scoring pass."""
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        engine.load_corpus(sample_records)
        answer = engine.find_answer("Berapa harga produk premium ini?")
        result = engine.score("Berapa harga produk premium ini?")

        assert answer.intent == result.intent == "price_inquiry"
        assert answer.matches == result.matches

    def test_find_answer_fallback(self, engine_config):
        """Without a reliable match the reply falls back by intent."""
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        engine.load_corpus([])
        answer = engine.find_answer("berapa harga paket premium")

        assert answer.source == "fallback"
        assert answer.category == "price_inquiry"
        assert answer.text


class TestCorpus:
    """Tests for corpus replacement."""

    def test_invalid_load_keeps_previous(self, engine_config, sample_records):
        """A failed load leaves the previous corpus active."""
        from tanya.errors import DataError
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        engine.load_corpus(sample_records)
        with pytest.raises(DataError):
            engine.load_corpus([{"answer": "no question"}])
        assert len(engine.corpus) == len(sample_records)

    def test_missing_dataset_uses_default(self, engine_config):
        """A missing dataset file loads the default corpus."""
        from tanya.search.corpus import DEFAULT_CORPUS
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        engine.load_corpus(engine_config.dataset_path)
        assert engine.corpus == DEFAULT_CORPUS

    def test_large_tier(self, engine_config, sample_records):
        """Corpora above the tier threshold use the large strategy and still match."""
        from tanya.search.engine import QAEngine
        from tanya.search.strategy import CorpusTier

        engine = QAEngine(engine_config.with_overrides(large_corpus_threshold=3))
        engine.load_corpus(sample_records)
        assert engine.strategy.tier is CorpusTier.LARGE
        assert engine.score("Apakah stok masih tersedia?").best.entry.tags == frozenset({"available"})

    def test_stats(self, engine_config, sample_records):
        """Stats report corpus size, tier, tags and caches."""
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        engine.load_corpus(sample_records)
        engine.score("halo")
        stats = engine.stats()

        assert stats["corpus_size"] == len(sample_records)
        assert stats["tier"] == "compact"
        assert "greeting" in stats["tags"]
        assert stats["model_trained"] is False
        assert {c["name"] for c in stats["caches"]} == {"overlap", "semantic", "context", "distance"}


@pytest.mark.slow
class TestTraining:
    """Tests for classifier training through the engine."""

    def test_outputs_follow_tag_vocabulary(self, engine_config):
        """Retraining with a new tag adds a classifier output."""
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        two = [
            {"question": "Selamat pagi", "answer": "Pagi!", "tags": ["greeting"]},
            {"question": "Saya butuh bantuan", "answer": "Siap!", "tags": ["help"]},
        ]
        engine.train(two)
        outputs = engine.classifier.predict(engine._index.extractor.feature_vector("halo"))
        assert sorted(outputs) == ["tag_greeting", "tag_help"]

        engine.train(two + [{"question": "Berapa harga paket?", "answer": "50 ribu", "tags": ["price_inquiry"]}])
        outputs = engine.classifier.predict(engine._index.extractor.feature_vector("halo"))
        assert sorted(outputs) == ["tag_greeting", "tag_help", "tag_price_inquiry"]

    def test_train_result(self, engine_config, sample_records):
        """Training reports dataset size, iterations and tags."""
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        result = engine.train(sample_records)

        assert result.success
        assert result.dataset_size == len(sample_records)
        assert 1 <= result.iterations <= engine_config.training.max_iterations
        assert result.augmented_size > 0
        assert "greeting" in result.tags

    def test_export_import_round_trip(self, engine_config, sample_records):
        """An imported model predicts exactly like the exported one."""
        from tanya.search.engine import QAEngine

        trained = QAEngine(engine_config)
        trained.train(sample_records)
        blob = trained.export_model()

        restored = QAEngine(engine_config)
        restored.load_corpus(sample_records)
        restored.import_model(blob)

        for query in ["halo", "berapa harga", "terima kasih"]:
            assert restored.score(query).relevance == trained.score(query).relevance
            assert restored.score(query).tags == trained.score(query).tags

    def test_import_rejects_bad_blob(self, engine_config):
        """Importing garbage raises ModelFormatError and keeps the model untrained."""
        from tanya.errors import ModelFormatError
        from tanya.search.engine import QAEngine

        engine = QAEngine(engine_config)
        with pytest.raises(ModelFormatError):
            engine.import_model({"format": "something-else"})
        assert engine.export_model() is None

    def test_train_async(self, engine_config, sample_records):
        """Background training completes and activates the model."""
        from tanya.search.engine import QAEngine

        with QAEngine(engine_config) as engine:
            engine.load_corpus(sample_records)
            result = engine.train_async().result(timeout=120)
        assert result.success
        assert engine.classifier.is_trained

    def test_initialize_trains_then_loads(self, engine_config, dataset_path):
        """First start trains and saves; the next start loads the saved model."""
        from tanya.search.engine import QAEngine

        first = QAEngine(engine_config)
        first.initialize(dataset_path)
        assert engine_config.model_path.is_file()

        second = QAEngine(engine_config)
        second.initialize(dataset_path)
        assert second.classifier.model.trained_at == first.classifier.model.trained_at
