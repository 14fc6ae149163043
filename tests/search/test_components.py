"""Tests for text processing components."""

import json

import pytest


class TestTextNormalizer:
    """Tests for TextNormalizer component."""

    def test_expands_abbreviations_and_strips_punctuation(self):
        """Normalizer lowercases, strips punctuation and expands chat abbreviations."""
        from tanya.search.components.normalizer import TextNormalizer

        assert TextNormalizer().process("Sy mau tanya, yg premium ada?") == "saya mau tanya yang premium ada"

    def test_collapses_whitespace(self):
        """Normalizer collapses runs of whitespace and underscores."""
        from tanya.search.components.normalizer import normalize

        assert normalize("  halo___kak   \n pagi ") == "halo kak pagi"

    def test_non_string_input(self):
        """Normalizer returns empty string for non-string input."""
        from tanya.search.components.normalizer import TextNormalizer

        assert TextNormalizer().process(None) == ""
        assert TextNormalizer().process(42) == ""

    @pytest.mark.parametrize(
        "text",
        [
            "Tq kak, sdh bayar!!",
            "thx... gk jadi pesan",
            "  Selamat   PAGI_kak ",
            "Harga paket Rp50.000/bln?",
            "Ok, yg premium blm ready?",
        ],
    )
    def test_idempotent(self, text):
        """Normalizing normalized text changes nothing."""
        from tanya.search.components.normalizer import normalize

        once = normalize(text)
        assert normalize(once) == once

    def test_abbreviation_expansions_are_stable(self):
        """No expansion introduces another abbreviation."""
        from tanya.search.components.normalizer import normalize
        from tanya.search.lexicon import ABBREVIATIONS

        assert normalize("tq") == "thank you"
        for abbreviation in ABBREVIATIONS:
            once = normalize(abbreviation)
            assert normalize(once) == once


class TestStemmer:
    """Tests for the Indonesian stemmer."""

    @pytest.mark.parametrize(
        "word,expected",
        [
            ("pembayaran", "pembayar"),
            ("bantuan", "bantu"),
            ("menggunakan", "guna"),
            ("bukunya", "buku"),
            ("pesanan", "pesan"),
            ("tersedia", "sedia"),
        ],
    )
    def test_known_stems(self, word, expected):
        """Stemmer strips suffixes and prefixes of common words."""
        from tanya.search.components.stemmer import stem

        assert stem(word) == expected

    def test_idempotent_over_vocabulary(self, dataset_path):
        """Stemming a stem changes nothing for any dataset or lexicon word."""
        from tanya.search import lexicon
        from tanya.search.components.normalizer import normalize
        from tanya.search.components.stemmer import stem

        words = set()
        for record in json.loads(dataset_path.read_text(encoding="utf-8")):
            for field in ("question", "answer"):
                if isinstance(record.get(field), str):
                    words.update(normalize(record[field]).split())
        for table in (
            lexicon.POSITIVE_WORDS,
            lexicon.NEGATIVE_WORDS,
            lexicon.IMPORTANT_KEYWORDS,
            lexicon.INDONESIAN_MARKERS,
            *lexicon.PATTERNS.values(),
        ):
            for keyword in table:
                words.update(normalize(keyword).split())

        unstable = {w: (stem(w), stem(stem(w))) for w in sorted(words) if stem(stem(w)) != stem(w)}
        assert unstable == {}

    def test_short_words_untouched(self):
        """Words shorter than three characters are returned as-is."""
        from tanya.search.components.stemmer import stem

        assert stem("di") == "di"
        assert stem("ke") == "ke"

    def test_rejects_non_string(self):
        """Stemmer component raises TypeError for non-string input."""
        from tanya.search.components.stemmer import Stemmer

        with pytest.raises(TypeError):
            Stemmer().process(123)


class TestDistance:
    """Tests for edit distance and overlap primitives."""

    @pytest.mark.parametrize("strategy", ["matrix", "rolling"])
    def test_known_distances(self, strategy):
        """Edit distance counts edits and adjacent transpositions as one."""
        from tanya.search.components.distance import edit_distance

        assert edit_distance("harga", "hagra", strategy) == 1
        assert edit_distance("kitten", "sitting", strategy) == 3
        assert edit_distance("", "abc", strategy) == 3
        assert edit_distance("bayar", "bayar", strategy) == 0

    def test_strategies_agree(self):
        """Matrix and rolling strategies return the same distance."""
        from tanya.search.components.distance import edit_distance

        pairs = [
            ("pembayaran", "pembyaran"),
            ("tersedia", "tresedia"),
            ("selamat pagi", "slamat pgi"),
            ("a" * 40 + "bc", "cb" + "a" * 38),
        ]
        for a, b in pairs:
            assert edit_distance(a, b, "matrix") == edit_distance(a, b, "rolling")

    def test_symmetric_and_triangle(self):
        """Distance is symmetric and obeys the triangle inequality on typo variants."""
        from tanya.search.components.distance import edit_distance

        for a in ["harga", "hagra", "harg"]:
            for b in ["harga", "hagra", "harg"]:
                assert edit_distance(a, b) == edit_distance(b, a)

        words = ["harga", "harg", "hargaa", "barga", "harta"]
        for a in words:
            for b in words:
                for c in words:
                    assert edit_distance(a, c) <= edit_distance(a, b) + edit_distance(b, c)

    def test_unknown_strategy(self):
        """Unknown strategy raises ValueError."""
        from tanya.search.components.distance import edit_distance

        with pytest.raises(ValueError):
            edit_distance("abc", "abd", strategy="diagonal")

    def test_jaccard_symmetry(self):
        """Jaccard is symmetric and zero for two empty sets."""
        from tanya.search.components.distance import jaccard, token_jaccard

        assert jaccard({"a", "b"}, {"b", "c"}) == jaccard({"b", "c"}, {"a", "b"}) == pytest.approx(1 / 3)
        assert jaccard([], []) == 0.0
        assert token_jaccard("harga paket premium", "paket harga") == token_jaccard("paket harga", "harga paket premium")

    def test_bigram_overlap_identical(self):
        """Identical texts overlap fully even without word pairs."""
        from tanya.search.components.distance import bigram_overlap

        assert bigram_overlap("halo", "halo") == 1.0
        assert bigram_overlap("halo", "pagi") == 0.0

    def test_char_similarity_length_exit(self):
        """Very different lengths short-circuit to half the length ratio."""
        from tanya.search.components.distance import char_similarity

        assert char_similarity("abc", "abcdefgh") == pytest.approx(3 / 8 * 0.5)
        assert char_similarity("harga", "harga") == 1.0

    def test_fast_distance_length_gap(self):
        """Fast distance treats a length gap over two as too far."""
        from tanya.search.components.distance import fast_distance

        assert fast_distance("abc", "abcdef") == 3
        assert fast_distance("harga", "harga") == 0


class TestSentimentScorer:
    """Tests for lexicon sentiment scoring."""

    def test_neutral_text(self):
        """Text without sentiment words scores 0.5."""
        from tanya.search.components.sentiment import SentimentScorer

        assert SentimentScorer().process("berapa harga paket") == 0.5
        assert SentimentScorer().process("") == 0.5

    def test_polarity(self):
        """Positive words score above neutral and negative words below."""
        from tanya.search.components.sentiment import SentimentScorer

        scorer = SentimentScorer()
        assert scorer.process("layanannya bagus dan cepat") > 0.5
        assert scorer.process("pelayanan buruk dan lambat") < 0.5

    def test_negation_flips(self):
        """A negator flips the polarity of the next word."""
        from tanya.search.components.sentiment import raw_sentiment

        assert raw_sentiment("bagus") > 0
        assert raw_sentiment("tidak bagus") < 0


class TestFeatureExtractor:
    """Tests for FeatureExtractor component."""

    def test_intent(self, extractor):
        """Intent rules fire in priority order."""
        assert extractor.extract_intent("berapa harga netflix") == "price_inquiry"
        assert extractor.extract_intent("selamat pagi") == "greeting"
        assert extractor.extract_intent("asdfghjkl") == "general"

    def test_patterns_use_raw_punctuation(self, extractor):
        """Structural patterns come from the raw text."""
        patterns = extractor.extract_patterns("Halo?")
        assert "question_mark" in patterns
        assert "greeting" in patterns
        assert "very_short_query" in patterns

    def test_fuzzy_keyword_match(self, extractor):
        """A one-letter typo still matches on the compact tier."""
        from tanya.search import lexicon

        keywords = lexicon.PATTERNS["payment"]
        assert extractor.keyword_match("pembyaran", keywords)
        assert not extractor.keyword_match("pembyaran", keywords, fuzzy=False)

    def test_injected_profile_cache(self):
        """An injected cache is used even while it is still empty."""
        from tanya.config import EngineConfig
        from tanya.search.cache import BoundedCache
        from tanya.search.components.features import FeatureExtractor
        from tanya.search.strategy import COMPACT

        cache = BoundedCache("profile", 8)
        extractor = FeatureExtractor(EngineConfig(), COMPACT, cache=cache)
        profile = extractor.profile("halo")

        assert len(cache) == 1
        assert "halo" in cache
        assert extractor.profile("halo") is profile

    def test_short_keywords_need_whole_words(self, extractor):
        """Two-letter keywords do not match inside longer words."""
        assert extractor.keyword_match("bayar pakai va", ["va"])
        assert not extractor.keyword_match("java", ["va"], fuzzy=False)

    def test_entities(self, extractor):
        """Known entity names are found as whole words."""
        profile = extractor.profile("Berapa harga Netflix?")
        assert "netflix" in profile.entities

    def test_feature_vector_shape(self, extractor):
        """Feature vectors always carry every feature name with values in [0, 1]."""
        from tanya.search.components.features import FEATURE_NAMES

        for text in ["", "halo", "Berapa harga paket premium Netflix bulan ini?"]:
            vector = extractor.feature_vector(text)
            assert tuple(vector) == FEATURE_NAMES
            assert all(0.0 <= value <= 1.0 for value in vector.values())

    def test_profile_cached(self, extractor):
        """Repeated profiles come from the cache."""
        first = extractor.profile("selamat pagi")
        assert extractor.profile("selamat pagi") is first
