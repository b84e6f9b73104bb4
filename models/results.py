"""
Result models returned by the search pipeline.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .catalog import CatalogItem


@dataclass
class ScoredCandidate:
    """A catalog item with its final score and per-term breakdown."""
    item: CatalogItem
    score: float
    breakdown: Dict[str, float] = field(default_factory=dict)


@dataclass
class ComparisonItem:
    """One column of a product comparison."""
    title: str
    attributes: Dict[str, Any]
    score: float
    is_recommended: bool = False
    url: str = ""
    price: Optional[float] = None
    sale_price: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "attributes": self.attributes,
            "score": self.score,
            "is_recommended": self.is_recommended,
            "url": self.url,
            "price": self.price,
            "sale_price": self.sale_price,
        }


@dataclass
class Recommendation:
    item: ComparisonItem
    reasons: List[str] = field(default_factory=list)


@dataclass
class ComparisonResult:
    """Side-by-side comparison of up to ``max_items`` products."""
    items: List[ComparisonItem] = field(default_factory=list)
    attribute_labels: List[str] = field(default_factory=list)
    recommendation: Optional[Recommendation] = None
    table_markdown: str = ""

    def to_dict(self) -> Dict[str, Any]:
        recommendation = None
        if self.recommendation:
            recommendation = {
                "item": self.recommendation.item.to_dict(),
                "reasons": self.recommendation.reasons,
            }
        return {
            "items": [i.to_dict() for i in self.items],
            "attribute_labels": self.attribute_labels,
            "recommendation": recommendation,
            "table_markdown": self.table_markdown,
        }


@dataclass
class SearchResult:
    """Outcome of one search call (single or compound)."""
    results: List[CatalogItem] = field(default_factory=list)
    intent: str = "fuzzy"
    entities: Dict[str, bool] = field(default_factory=dict)
    confidence: int = 0
    answer: Optional[str] = None
    diagnostics: List[Any] = field(default_factory=list)
    sentiment: Optional[Dict[str, Any]] = None
    score_breakdown: Optional[Dict[str, float]] = None
    scored: List[ScoredCandidate] = field(default_factory=list)
    comparison: Optional[ComparisonResult] = None

    @property
    def top(self) -> Optional[CatalogItem]:
        return self.results[0] if self.results else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "results": [item.to_dict() for item in self.results],
            "intent": self.intent,
            "entities": self.entities,
            "confidence": self.confidence,
            "answer": self.answer,
            "sentiment": self.sentiment,
            "score_breakdown": self.score_breakdown,
            "diagnostics": [
                e.to_dict() if hasattr(e, "to_dict") else e for e in self.diagnostics
            ],
            "comparison": self.comparison.to_dict() if self.comparison else None,
        }
