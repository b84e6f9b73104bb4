"""Tests for intent classification and detection."""

import pytest
from config.rules import IntentRule, RuleConditions, evaluate_rule
from intent.classifier import NaiveBayesClassifier, UNKNOWN_INTENT, tokenize
from intent.orchestrator import IntentOrchestrator


@pytest.fixture
def orchestrator():
    return IntentOrchestrator()


def detect(orchestrator, text):
    tokens = text.lower().split()
    return orchestrator.detect(text, tokens, tokens)


# ── Classifier ────────────────────────────────────────

class TestNaiveBayes:
    def test_untrained_returns_unknown(self):
        result = NaiveBayesClassifier().classify("harga iphone")
        assert result.intent == UNKNOWN_INTENT
        assert result.confidence == 0.0

    def test_tokenize_drops_short_words(self):
        assert tokenize("Hi, cek harga dong!") == ["cek", "harga", "dong"]

    def test_distinct_labels(self):
        clf = NaiveBayesClassifier()
        clf.train_data({
            "sales_harga": ["harga harga harga"],
            "chat_greeting": ["halo"],
        })
        result = clf.classify("harga harga")
        assert result.intent == "sales_harga"
        assert result.confidence > 0.8
        assert set(result.all_scores) == {"sales_harga", "chat_greeting"}

    def test_incremental_training(self):
        clf = NaiveBayesClassifier()
        clf.train("barang rusak", "support_complaint")
        clf.train("cek harga", "sales_harga")
        assert clf.classify("rusak").intent == "support_complaint"
        assert set(clf.labels) == {"support_complaint", "sales_harga"}

    def test_confidence_is_bounded(self):
        clf = NaiveBayesClassifier()
        clf.train_data({"a_label": ["satu dua"], "b_label": ["tiga empat"]})
        confidence = clf.classify("satu tiga lima").confidence
        assert 0.0 < confidence <= 1.0


# ── Intent Detection ──────────────────────────────────

class TestIntentOrchestrator:
    def test_sales_trigger(self, orchestrator):
        assert detect(orchestrator, "beli iphone") == "sales_beli"
        assert detect(orchestrator, "harga iphone") == "sales_harga"
        assert detect(orchestrator, "ada promo") == "sales_promo"

    def test_contact_before_sales(self, orchestrator):
        assert detect(orchestrator, "hubungi admin") == "chat_contact"
        assert detect(orchestrator, "whatsapp harga") == "chat_contact"

    def test_greeting(self, orchestrator):
        assert detect(orchestrator, "halo") == "chat_greeting"

    def test_unknown_is_fuzzy(self, orchestrator):
        assert detect(orchestrator, "xyz") == "fuzzy"

    def test_confident_classifier_wins(self):
        orchestrator = IntentOrchestrator(training_data={
            "sales_harga": ["harga harga harga"],
            "chat_greeting": ["halo"],
        })
        # "halo" is a greeting trigger, but the classifier is confident
        assert orchestrator.detect("harga harga", ["halo"], ["halo"]) == "sales_harga"

    def test_custom_rule_before_chat_triggers(self):
        rule = IntentRule(intent="support_garansi", conditions=RuleConditions(tokens=["garansi"]))
        orchestrator = IntentOrchestrator(intent_rules=[rule])
        assert detect(orchestrator, "garansi halo") == "support_garansi"

    def test_rule_with_entities(self):
        rule = IntentRule(intent="sales_apple", conditions=RuleConditions(entities=["apple"]))
        orchestrator = IntentOrchestrator(intent_rules=[rule])
        assert orchestrator.detect("xyz", ["xyz"], ["xyz"], {"apple": True}) == "sales_apple"
        assert orchestrator.detect("xyz", ["xyz"], ["xyz"], {"apple": False}) == "fuzzy"

    def test_stemmed_tokens_match_triggers(self, orchestrator):
        assert orchestrator.detect("pembelian", ["pembelian"], ["beli"]) == "sales_beli"

    def test_train_adds_examples(self, orchestrator):
        for _ in range(20):
            orchestrator.train("servis berkala", "support_servis")
        assert detect(orchestrator, "servis berkala") == "support_servis"

    def test_custom_sales_triggers_merge(self):
        orchestrator = IntentOrchestrator(sales_triggers={"stok": ["stok", "ready"]})
        assert detect(orchestrator, "ready gak") == "sales_stok"
        assert detect(orchestrator, "beli iphone") == "sales_beli"


# ── Rules ─────────────────────────────────────────────

class TestRules:
    def test_all_condition_kinds_must_hold(self):
        conditions = RuleConditions(tokens=["iphone"], categories=["produk"], intents=["sales_*"])
        assert conditions.matches(["iphone"], category="Produk", intent="sales_harga")
        assert not conditions.matches(["iphone"], category="Page", intent="sales_harga")
        assert not conditions.matches(["iphone"], category="Produk", intent="chat_greeting")
        assert not conditions.matches(["samsung"], category="Produk", intent="sales_harga")

    def test_empty_conditions_always_match(self):
        assert RuleConditions().matches([])

    def test_exact_intent(self):
        conditions = RuleConditions(intents=["sales_harga"])
        assert conditions.matches([], intent="sales_harga")
        assert not conditions.matches([], intent="sales_hargaan")

    def test_evaluation_error_is_non_match(self):
        conditions = RuleConditions(tokens=["iphone"])
        assert evaluate_rule(conditions, tokens=None) is False
