"""
Declarative rule language for intent detection and score boosting.

Rules are data, not callables: each rule carries tagged conditions that a
single fixed evaluator (``RuleConditions.matches``) interprets.
"""

import logging
from typing import Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class RuleConditions(BaseModel):
    """
    Tagged conditions shared by intent and boosting rules.

    Each non-empty condition list needs at least one match; empty lists
    are ignored. ``categories`` match as case-insensitive substrings of the
    item category. ``intents`` match exactly, or by prefix when the entry
    ends with ``*`` (``"sales_*"``).
    """
    entities: List[str] = Field(default_factory=list)
    tokens: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    intents: List[str] = Field(default_factory=list)

    def matches(
        self,
        tokens: Iterable[str],
        entities: Optional[Mapping[str, bool]] = None,
        category: Optional[str] = None,
        intent: Optional[str] = None,
    ) -> bool:
        entities = entities or {}

        if self.entities and not any(entities.get(name) for name in self.entities):
            return False

        if self.tokens:
            token_set = set(tokens)
            if not any(t.lower() in token_set for t in self.tokens):
                return False

        if self.categories:
            if not category:
                return False
            cat = category.lower()
            if not any(c.lower() in cat for c in self.categories):
                return False

        if self.intents:
            if not intent:
                return False
            if not any(self._intent_matches(pattern, intent) for pattern in self.intents):
                return False

        return True

    @staticmethod
    def _intent_matches(pattern: str, intent: str) -> bool:
        if pattern.endswith("*"):
            return intent.startswith(pattern[:-1])
        return intent == pattern


class IntentRule(BaseModel):
    """Custom intent rule evaluated after contact triggers."""
    intent: str
    conditions: RuleConditions = Field(default_factory=RuleConditions)


class BoostingRule(BaseModel):
    """Adds ``score`` to a candidate when its conditions hold."""
    name: str
    score: float
    conditions: RuleConditions = Field(default_factory=RuleConditions)


def evaluate_rule(conditions: RuleConditions, **kwargs) -> bool:
    """Evaluate conditions, treating evaluation errors as a non-match."""
    try:
        return conditions.matches(**kwargs)
    except (TypeError, AttributeError, ValueError) as e:
        logger.debug(f"Rule evaluation failed, skipping: {e}")
        return False
