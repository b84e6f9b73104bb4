"""
Hybrid intent detection.

Combines the statistical classifier with ordered keyword rules.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from config import defaults
from config.defaults import merge_table
from config.rules import IntentRule, evaluate_rule

from .classifier import NaiveBayesClassifier

logger = logging.getLogger(__name__)

FUZZY_INTENT = "fuzzy"
CONTACT_INTENT = "chat_contact"


class IntentOrchestrator:
    """
    Resolves one intent label per query.

    Priority:
    1. Classifier, when confidence > threshold
    2. Contact triggers → "chat_contact"
    3. Custom intent rules, in order
    4. Conversational triggers → "chat_<name>"
    5. Sales triggers → "sales_<name>"
    6. Classifier, when confidence > fallback threshold
    7. "fuzzy"
    """

    def __init__(
        self,
        classifier: Optional[NaiveBayesClassifier] = None,
        training_data: Optional[Mapping[str, Sequence[str]]] = None,
        intent_rules: Optional[List[IntentRule]] = None,
        sales_triggers: Optional[Mapping[str, Sequence[str]]] = None,
        chat_triggers: Optional[Mapping[str, Sequence[str]]] = None,
        contact_triggers: Optional[Sequence[str]] = None,
        threshold: float = 0.7,
        fallback_threshold: float = 0.6,
    ):
        """
        Initialize the orchestrator.

        Args:
            classifier: Pre-built classifier; a fresh one is trained otherwise
            training_data: Label → phrases (defaults when None)
            intent_rules: Custom rules evaluated after contact triggers
            sales_triggers: Merged over default sales trigger table
            chat_triggers: Merged over default conversational triggers
            contact_triggers: Replaces default contact triggers
            threshold: Classifier confidence that wins outright
            fallback_threshold: Classifier confidence accepted when no rule fires
        """
        if classifier is None:
            classifier = NaiveBayesClassifier()
            classifier.train_data(
                training_data if training_data is not None else defaults.INTENT_TRAINING
            )
        self.classifier = classifier
        self.intent_rules = list(intent_rules or [])
        self.sales_triggers = merge_table(defaults.SALES_TRIGGERS, sales_triggers)
        self.chat_triggers = merge_table(defaults.CHAT_TRIGGERS, chat_triggers)
        self.contact_triggers = list(
            contact_triggers if contact_triggers is not None else defaults.CONTACT_TRIGGERS
        )
        self.threshold = threshold
        self.fallback_threshold = fallback_threshold

    def train(self, text: str, label: str) -> None:
        self.classifier.train(text, label)

    def detect(
        self,
        query: str,
        tokens: Iterable[str],
        stemmed_tokens: Iterable[str],
        entities: Optional[Dict[str, bool]] = None,
    ) -> str:
        """
        Detect the intent of a query.

        Args:
            query: Text the classifier sees
            tokens: Filtered query tokens
            stemmed_tokens: Stems of the tokens
            entities: Detected entity flags

        Returns:
            Intent label
        """
        words = set(tokens) | set(stemmed_tokens)
        prediction = self.classifier.classify(query or "")

        if prediction.confidence > self.threshold:
            logger.debug(f"Intent from classifier: {prediction.intent} ({prediction.confidence:.2f})")
            return prediction.intent

        if self._has_any(words, self.contact_triggers):
            return CONTACT_INTENT

        for rule in self.intent_rules:
            if evaluate_rule(rule.conditions, tokens=words, entities=entities):
                return rule.intent

        for name, triggers in self.chat_triggers.items():
            if self._has_any(words, triggers):
                return f"chat_{name}"

        for name, triggers in self.sales_triggers.items():
            if self._has_any(words, triggers):
                return f"sales_{name}"

        if prediction.confidence > self.fallback_threshold:
            return prediction.intent

        return FUZZY_INTENT

    @staticmethod
    def _has_any(words: set, triggers: Iterable[str]) -> bool:
        return any(t.lower() in words for t in triggers)
