"""
Answer composition for search results.

Deterministic template-based answers: no randomness, no LLM.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional

from config import defaults
from config.defaults import merge_table
from models.catalog import CatalogItem
from models.results import SearchResult

logger = logging.getLogger(__name__)

AttributeExtractor = Callable[[CatalogItem], Dict[str, Any]]


def format_currency(amount: float, symbol: str = "Rp", locale: str = "id-ID") -> str:
    """
    Format a price for display.

    Indonesian locale abbreviates millions ("Rp 20.0Jt") and groups
    thousands with dots; other locales group with commas.
    """
    if locale == "id-ID" and amount >= 1_000_000:
        return f"{symbol} {amount / 1_000_000:.1f}Jt"
    grouped = f"{amount:,.0f}"
    if locale.startswith("id"):
        grouped = grouped.replace(",", ".")
    return f"{symbol} {grouped}"


class ResponseComposer:
    """
    Builds the final answer string for a search.

    Order:
    1. Item's canned answer, or an intent template (price / features)
    2. Assembled description of the top item
    3. Conversational fallbacks, then the no-results message
    4. Recommendation note for sales intents
    """

    FEATURE_INTENTS = ("sales_fitur", "fuzzy_fitur")

    def __init__(
        self,
        answer_templates: Optional[Mapping[str, str]] = None,
        fallback_responses: Optional[Mapping[str, str]] = None,
        schema_fields: Optional[Mapping[str, str]] = None,
        currency_symbol: str = "Rp",
        locale: str = "id-ID",
    ):
        self.templates = merge_table(defaults.ANSWER_TEMPLATES, answer_templates)
        self.fallbacks = merge_table(defaults.FALLBACK_RESPONSES, fallback_responses)
        self.schema = merge_table(defaults.SCHEMA, schema_fields)
        self.currency_symbol = currency_symbol
        self.locale = locale

    def compose(
        self,
        result: SearchResult,
        intent: str,
        is_conversational: bool,
        extract_attributes: AttributeExtractor,
    ) -> Optional[str]:
        """
        Compose an answer.

        Args:
            result: Ranked result of one sub-search
            intent: Detected intent label
            is_conversational: True for chat_* intents
            extract_attributes: Attribute extraction callback

        Returns:
            Answer text, or None when nothing applies
        """
        top = result.top
        answer = (top.answer if top else None) or ""

        if top is not None:
            attributes = extract_attributes(top)
            price = top.effective_price
            if intent == "sales_harga" and price:
                answer = self.templates["price"].format(
                    title=top.title, price=self.format_price(price)
                )
            elif intent in self.FEATURE_INTENTS:
                features = attributes.get(self.schema["FEATURES"]) or top.description
                answer = self.templates["features"].format(title=top.title, features=features)
            elif not answer:
                answer = self._assemble_description(top, attributes)

        if not answer:
            if intent in self.fallbacks:
                answer = self.fallbacks[intent]
            elif not is_conversational and top is None:
                answer = self.templates["no_results"]

        if answer and answer != self.templates["no_results"]:
            if intent.startswith("sales_") and top is not None and top.is_recommended:
                answer = f"{answer.rstrip('. ')}. {self.templates['recommended']}"

        return answer or None

    def format_price(self, amount: float) -> str:
        return format_currency(amount, self.currency_symbol, self.locale)

    def _assemble_description(self, item: CatalogItem, attributes: Dict[str, Any]) -> str:
        sentence = f"**{item.title}**"
        if item.category:
            sentence += f" adalah {item.category}"

        price = item.effective_price
        if price:
            sentence += f" yang tersedia dengan harga {self.format_price(price)}"

        features = attributes.get(self.schema["FEATURES"])
        if not features and item.description and len(item.description) < 100:
            features = item.description

        if features:
            sentence += f". Produk ini memiliki keunggulan berupa {features}."
        else:
            sentence += "."
        return sentence
