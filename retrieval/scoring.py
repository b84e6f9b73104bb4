"""
Relevance scoring for retrieved catalog items.

Re-ranks retrieval candidates with additive, explainable boosts built
from the processed query, the detected intent and the conversation state.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from config.engine_config import ScoringWeights
from config.rules import BoostingRule, evaluate_rule
from conversation.context import ConversationState
from linguistics.preprocessor import ProcessedQuery
from models.catalog import CatalogItem

logger = logging.getLogger(__name__)


def _bigrams(text: str) -> set:
    text = text.lower()
    return {text[i:i + 2] for i in range(len(text) - 1)}


def dice_coefficient(a: str, b: str) -> float:
    """Sørensen-Dice similarity over character bigram sets (0..1)."""
    first, second = _bigrams(a or ""), _bigrams(b or "")
    total = len(first) + len(second)
    if total == 0:
        return 0.0
    return 2.0 * len(first & second) / total


@dataclass
class ScoreResult:
    """Final score plus the contribution of every named term."""
    score: float
    breakdown: Dict[str, float] = field(default_factory=dict)


class ScoringEngine:
    """
    Scores a catalog item against a processed query.

    Terms:
    - retrieval: inverse of the index distance
    - token_match / sequence_bonus: tokens and bigrams in item text
    - title_similarity: Dice similarity of tokens to the title
    - title_hit / category_hit: token substrings of title / category
    - context_category / context_item: agreement with the conversation
    - recommended, urgency, stock, sales_price, sales_category
    - custom_rules: configured boosting rules
    - crawler_penalty: generic crawled pages
    """

    BREAKDOWN_KEYS = (
        "retrieval", "token_match", "sequence_bonus", "title_similarity",
        "title_hit", "category_hit", "context_category", "context_item",
        "recommended", "urgency", "stock", "sales_price", "sales_category",
        "custom_rules", "crawler_penalty",
    )

    def __init__(
        self,
        weights: Optional[ScoringWeights] = None,
        boosting_rules: Optional[List[BoostingRule]] = None,
        crawler_category: str = "Page",
    ):
        self.weights = weights or ScoringWeights()
        self.boosting_rules = list(boosting_rules or [])
        self.crawler_category = crawler_category
        self._stock_pattern = re.compile(self.weights.stock_pattern, re.IGNORECASE)
        self._sales_category_pattern = re.compile(self.weights.sales_category_pattern, re.IGNORECASE)

    def calculate(
        self,
        item: CatalogItem,
        processed: ProcessedQuery,
        retrieval_score: float,
        intent: str,
        context_state: Optional[ConversationState] = None,
    ) -> ScoreResult:
        """
        Score one item.

        Args:
            item: Candidate item
            processed: Preprocessed query
            retrieval_score: Index distance, 0 (best) to 1
            intent: Detected intent label
            context_state: Conversation state snapshot

        Returns:
            ScoreResult with total and per-term breakdown
        """
        w = self.weights
        state = context_state or ConversationState()
        tokens = list(processed.tokens)
        title = item.title.lower()
        category = (item.category or "").lower()
        full_text = item.full_text

        b: Dict[str, float] = {key: 0.0 for key in self.BREAKDOWN_KEYS}
        b["retrieval"] = (1.0 - retrieval_score) * w.retrieval

        for i, token in enumerate(tokens):
            if token in full_text:
                b["token_match"] += w.token_match
            if i > 0 and f"{tokens[i - 1]} {token}" in full_text:
                b["sequence_bonus"] += w.sequence_bonus
            similarity = dice_coefficient(token, title)
            if similarity > w.title_similarity_threshold:
                b["title_similarity"] += similarity * w.title_similarity

        if any(t in title for t in tokens):
            b["title_hit"] = w.title_hit
        if category and any(t in category for t in tokens):
            b["category_hit"] = w.category_hit

        if state.last_category and item.category == state.last_category:
            b["context_category"] = w.context_category
        subject = state.locked_entity_id or state.last_item_id
        if subject and item.item_id == subject:
            b["context_item"] = w.context_item

        if item.is_recommended:
            b["recommended"] = w.recommended

        if processed.signals.is_urgent:
            b["urgency"] = w.urgency
            if self._stock_pattern.search(item.category or ""):
                b["stock"] = w.stock

        if intent and intent.startswith("sales_"):
            if item.price or item.sale_price:
                b["sales_price"] = w.sales_price
            if self._sales_category_pattern.search(item.category or ""):
                b["sales_category"] = w.sales_category

        for rule in self.boosting_rules:
            if evaluate_rule(
                rule.conditions,
                tokens=tokens,
                entities=processed.entities,
                category=item.category,
                intent=intent,
            ):
                b["custom_rules"] += rule.score

        if item.category == self.crawler_category:
            b["crawler_penalty"] = w.crawler_penalty

        return ScoreResult(score=sum(b.values()), breakdown=b)

    def calculate_comparison_score(self, item: CatalogItem, attributes: Mapping[str, Any]) -> float:
        """Score used to order items in a comparison table."""
        w = self.weights
        score = 0.0
        if item.is_recommended:
            score += w.comparison_recommended

        rating = item.rating if item.rating is not None else _to_float(attributes.get("rating"))
        if rating:
            score += rating * w.comparison_rating

        if item.price and item.sale_price:
            score += (item.price - item.sale_price) / item.price * w.comparison_discount

        score += len(attributes) * w.comparison_attribute
        return score


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(str(value).replace(",", "."))
    except ValueError:
        return None
