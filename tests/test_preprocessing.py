"""Tests for query preprocessing, language providers and sentiment."""

import asyncio

import pytest
from linguistics.preprocessor import PreprocessingEngine
from linguistics.providers import (
    EnglishProvider,
    IndonesianProvider,
    LanguageProvider,
    get_provider,
)
from linguistics.sentiment import SentimentAnalyzer
from config.defaults import STOP_WORDS


@pytest.fixture
def preprocessor(provider):
    return PreprocessingEngine(provider=provider, stop_words=STOP_WORDS)


@pytest.fixture
def analyzer():
    return SentimentAnalyzer()


# ── Providers ─────────────────────────────────────────

class TestProviders:
    def test_providers_satisfy_protocol(self):
        assert isinstance(EnglishProvider(), LanguageProvider)
        assert isinstance(IndonesianProvider(), LanguageProvider)

    def test_get_provider_by_language(self):
        assert get_provider("en").locale == "en"
        assert get_provider("id").locale == "id"

    def test_english_stemming(self):
        p = EnglishProvider()
        assert p.stem("phones") == "phone"
        assert p.stem("batteries") == "battery"
        assert p.stem("running") == "run"
        assert p.stem("cat") == "cat"

    def test_normalize_strips_punctuation(self):
        assert EnglishProvider().normalize("Harga iPhone?!") == "harga iphone"

    def test_indonesian_stemming(self):
        p = IndonesianProvider()
        assert p.stem("makanan") == "makan"
        assert p.stem("membeli") == "beli"

    def test_indonesian_init_builds_stemmer(self):
        p = IndonesianProvider()
        assert not p.is_ready()
        asyncio.run(p.init())
        assert p.is_ready()


# ── Preprocessing ─────────────────────────────────────

class TestPreprocessing:
    def test_auto_correct_slang(self, preprocessor):
        assert preprocessor.auto_correct("gimana") == "bagaimana"
        assert preprocessor.auto_correct("hargany") == "harga"
        assert preprocessor.auto_correct("iphone") == "iphone"

    def test_canonical_word_is_kept(self, preprocessor):
        assert preprocessor.auto_correct("harga") == "harga"

    def test_stop_words_removed(self, preprocessor):
        result = preprocessor.process("saya mau harga iphone")
        assert "saya" not in result.tokens
        assert "mau" not in result.tokens
        assert "harga" in result.tokens
        assert "iphone" in result.tokens

    def test_single_char_tokens_dropped(self, preprocessor):
        result = preprocessor.process("x iphone")
        assert result.tokens == ("iphone",)

    def test_expansion_adds_synonyms(self, preprocessor):
        result = preprocessor.process("hargany iphone")
        assert "harga" in result.tokens
        assert "biaya" in result.expanded
        assert "biaya" not in result.tokens

    def test_stem_and_surface_forms_kept(self, preprocessor):
        result = preprocessor.process("phones")
        assert "phones" in result.tokens
        assert "phone" in result.tokens

    def test_process_is_repeatable(self, preprocessor):
        assert preprocessor.process("hargany iphone?") == preprocessor.process("hargany iphone?")

    def test_tokens_cover_every_stem(self, preprocessor):
        result = preprocessor.process("batteries phones")
        for word in ("batteries", "phones"):
            assert preprocessor.stem(word) in result.tokens

    def test_signals(self, preprocessor):
        assert preprocessor.process("harga iphone?").signals.is_question
        assert preprocessor.process("beli sekarang!").signals.is_urgent
        assert not preprocessor.process("beli iphone").signals.is_question

    def test_empty_and_invalid_input(self, preprocessor):
        assert preprocessor.process("").is_empty
        assert preprocessor.process("   ").is_empty
        assert preprocessor.process(None).is_empty

    def test_only_stop_words_is_empty(self, preprocessor):
        assert preprocessor.process("saya dan kamu").is_empty

    def test_entities(self, provider):
        engine = PreprocessingEngine(
            provider=provider,
            entity_definitions={"apple": ["iphone", "macbook"]},
        )
        result = engine.process("harga iphone")
        assert result.entities == {"apple": True}
        assert engine.process("harga samsung").entities == {"apple": False}

    def test_semantic_override_replaces_entry(self, provider):
        engine = PreprocessingEngine(provider=provider, semantic_map={"harga": ["ongkos"]})
        result = engine.process("harga")
        assert "ongkos" in result.expanded
        assert "biaya" not in result.expanded


# ── Attribute Extraction ──────────────────────────────

class TestAttributes:
    def test_schema_passthrough(self, preprocessor, iphone):
        attrs = preprocessor.extract_attributes(iphone)
        assert attrs["harga"] == 20_000_000
        assert attrs["rating"] == 4.8
        assert attrs["direkomendasikan"] is True

    def test_regex_extractors(self, preprocessor, iphone):
        attrs = preprocessor.extract_attributes(iphone)
        assert attrs["garansi"] == "1 tahun"

    def test_feature_list(self, preprocessor, iphone):
        attrs = preprocessor.extract_attributes(iphone)
        assert attrs["fitur"] == "kamera 48MP, chip A17 Pro"

    def test_sale_price(self, preprocessor, samsung):
        attrs = preprocessor.extract_attributes(samsung)
        assert attrs["harga_promo"] == 13_500_000
        assert attrs["direkomendasikan"] is False

    def test_preset_attributes_win(self, preprocessor, catalog_rows):
        from models.catalog import CatalogItem

        row = dict(catalog_rows[0], attributes={"garansi": "2 tahun", "harga": "hubungi kami"})
        attrs = preprocessor.extract_attributes(CatalogItem.from_dict(row))
        assert attrs["garansi"] == "2 tahun"
        assert attrs["harga"] == "hubungi kami"


# ── Sentiment ─────────────────────────────────────────

class TestSentiment:
    def test_positive(self, analyzer):
        result = analyzer.analyze("produk ini sangat bagus")
        assert result.label == "positive"
        assert result.score > 0

    def test_negative_phrase(self, analyzer):
        result = analyzer.analyze("kecewa berat sama pelayanannya")
        assert result.label == "negative"
        assert "kecewa berat" in result.details["negative_words"]

    def test_negation_flips(self, analyzer):
        result = analyzer.analyze("tidak bagus")
        assert result.label == "negative"
        assert result.details["negative_words"] == ["not bagus"]

    def test_urgency(self, analyzer):
        assert analyzer.analyze("tolong dibantu").is_urgent
        assert analyzer.analyze("kok belum dikirim!!").is_urgent
        assert not analyzer.analyze("harga iphone").is_urgent

    def test_neutral_and_invalid(self, analyzer):
        assert analyzer.analyze("harga iphone").label == "neutral"
        assert analyzer.analyze(None).score == 0

    def test_score_clamped(self, analyzer):
        result = analyzer.analyze("MANTAP MANTAP MANTAP MANTAP MANTAP!!!")
        assert -100 <= result.score <= 100

    def test_priority(self, analyzer):
        assert analyzer.priority("sangat kecewa tolong segera!") == 5
        assert analyzer.priority("harga iphone") == 2
        assert analyzer.priority("mantap keren") == 1
