"""
Fuzzy catalog index.

Weighted multi-field approximate matching built on difflib. Scores follow
the usual fuzzy-search convention: 0.0 is a perfect match, 1.0 no match.
"""

import logging
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Dict, List, Optional, Sequence

from models.catalog import CatalogItem

logger = logging.getLogger(__name__)

OR_SEPARATOR = " | "
EPSILON = 0.001

DEFAULT_FIELD_WEIGHTS = {
    "title": 0.8,
    "keywords": 0.5,
    "description": 0.2,
    "content": 0.1,
}


@dataclass
class IndexHit:
    """Index match; lower score is closer."""
    item: CatalogItem
    score: float


class FuzzyIndex:
    """
    In-memory fuzzy index over catalog items.

    A query may hold alternatives joined by ``" | "``; a field matches when
    any alternative is within ``threshold``. An alternative contained in a
    field has distance 0, otherwise the distance is ``1 - ratio`` against the
    closest word of the field. Matched field distances are combined as a
    weighted product, so heavier fields pull the score further down.
    """

    def __init__(
        self,
        items: Sequence[CatalogItem],
        field_weights: Optional[Dict[str, float]] = None,
        threshold: float = 0.45,
    ):
        self.field_weights = dict(field_weights or DEFAULT_FIELD_WEIGHTS)
        self.threshold = threshold
        self._entries = [(item, self._field_words(item)) for item in items]
        logger.debug(f"Fuzzy index built over {len(self._entries)} items")

    def __len__(self) -> int:
        return len(self._entries)

    def _field_words(self, item: CatalogItem) -> Dict[str, tuple]:
        values = {
            "title": item.title,
            "keywords": " ".join(item.keywords),
            "description": item.description,
            "content": item.content or "",
        }
        return {
            name: (text.lower(), tuple(text.lower().split()))
            for name, text in values.items()
            if name in self.field_weights
        }

    def search(self, query: str) -> List[IndexHit]:
        """
        Search the index.

        Args:
            query: Query text, alternatives separated by " | "

        Returns:
            Hits sorted by ascending score
        """
        terms = [t.strip().lower() for t in query.split("|") if t.strip()]
        if not terms:
            return []

        hits = []
        for item, fields in self._entries:
            total = 1.0
            matched = False
            for name, (text, words) in fields.items():
                distance = self._field_distance(terms, text, words)
                if distance > self.threshold:
                    continue
                matched = True
                total *= max(distance, EPSILON) ** self.field_weights[name]
            if matched:
                hits.append(IndexHit(item=item, score=total))

        hits.sort(key=lambda h: h.score)
        return hits

    @staticmethod
    def _field_distance(terms: List[str], text: str, words: tuple) -> float:
        if not text:
            return 1.0
        best = 1.0
        for term in terms:
            # two-letter terms only match whole words
            if len(term) > 2 and term in text:
                return 0.0
            for word in words:
                ratio = SequenceMatcher(None, term, word).ratio()
                best = min(best, 1.0 - ratio)
        return best
