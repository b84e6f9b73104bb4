"""
Product comparison tables.

Builds a side-by-side view of a few candidate products with a
recommended pick and a Markdown table.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from config import defaults
from config.defaults import merge_table
from models.catalog import CatalogItem
from models.results import ComparisonItem, ComparisonResult, Recommendation

logger = logging.getLogger(__name__)


class ProductComparator:
    """
    Compares catalog items attribute by attribute.

    Items are ordered by comparison score; the first one becomes the
    recommendation, with reasons (discount, cheapest).
    """

    def __init__(
        self,
        extract_attributes: Callable[[CatalogItem], Dict[str, Any]],
        comparison_score: Callable[[CatalogItem, Mapping[str, Any]], float],
        triggers: Optional[Sequence[str]] = None,
        labels: Optional[Mapping[str, str]] = None,
        label_map: Optional[Mapping[str, str]] = None,
    ):
        self.extract_attributes = extract_attributes
        self.comparison_score = comparison_score
        self.triggers = [
            t.lower() for t in (triggers if triggers is not None else defaults.COMPARISON_TRIGGERS)
        ]
        self.labels = merge_table(defaults.COMPARISON_LABELS, labels)
        self.label_map = merge_table(defaults.LABEL_MAP, label_map)

    def is_comparison_query(self, query: Any) -> bool:
        if not isinstance(query, str):
            return False
        lowered = query.lower()
        return any(t in lowered for t in self.triggers)

    def compare(self, candidates: Sequence[CatalogItem], max_items: int = 4) -> ComparisonResult:
        """
        Compare up to ``max_items`` candidates.

        Args:
            candidates: Items in retrieval order
            max_items: Maximum columns

        Returns:
            ComparisonResult (empty when there are no candidates)
        """
        items: List[ComparisonItem] = []
        for item in list(candidates)[:max_items]:
            attributes = self.extract_attributes(item)
            items.append(ComparisonItem(
                title=item.title,
                attributes=attributes,
                score=self.comparison_score(item, attributes),
                is_recommended=item.is_recommended,
                url=item.url,
                price=item.price,
                sale_price=item.sale_price,
            ))
        items.sort(key=lambda i: i.score, reverse=True)

        attribute_labels: List[str] = []
        for comparison_item in items:
            for name in comparison_item.attributes:
                if name not in attribute_labels:
                    attribute_labels.append(name)

        recommendation = None
        if items:
            recommendation = Recommendation(item=items[0], reasons=self._reasons(items[0], items))

        return ComparisonResult(
            items=items,
            attribute_labels=attribute_labels,
            recommendation=recommendation,
            table_markdown=self._table_markdown(items, attribute_labels) if items else "",
        )

    def summary(self, comparison: ComparisonResult) -> str:
        """One-paragraph answer text for a comparison."""
        if comparison.recommendation is None:
            return self.labels["no_products"]
        title = comparison.recommendation.item.title
        return f"{self.labels['recommendation']}: **{title}**\n\n{comparison.table_markdown}"

    def _reasons(self, item: ComparisonItem, all_items: List[ComparisonItem]) -> List[str]:
        reasons = []
        if item.price and item.sale_price:
            discount = round((item.price - item.sale_price) / item.price * 100)
            reasons.append(self.labels["discount"].format(discount=discount))

        prices = [i.sale_price or i.price for i in all_items if i.sale_price or i.price]
        own_price = item.sale_price or item.price
        if own_price and len(prices) > 1 and own_price == min(prices):
            reasons.append(self.labels["cheapest"])
        return reasons

    def _table_markdown(self, items: List[ComparisonItem], attribute_labels: List[str]) -> str:
        headers = " | ".join(i.title + (" ✨" if i.is_recommended else "") for i in items)
        aligns = " | ".join(":---" for _ in items)
        lines = [f"| Fitur | {headers} |", f"| :--- | {aligns} |"]

        for attr in attribute_labels:
            cells = []
            for item in items:
                value = item.attributes.get(attr)
                if value is None:
                    cells.append("-")
                elif isinstance(value, bool):
                    cells.append("✓" if value else "✗")
                else:
                    cells.append(str(value))
            lines.append(f"| **{self._label(attr)}** | " + " | ".join(cells) + " |")

        return "\n".join(lines) + "\n"

    def _label(self, attr: str) -> str:
        return self.label_map.get(attr) or attr[:1].upper() + attr[1:]
