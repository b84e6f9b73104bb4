"""
Compound query splitting.

Breaks one utterance that asks several things ("harga iphone? fiturnya
apa") into focused sub-queries that are searched one after another.
"""

import logging
import re
from typing import Dict, List, Mapping, Optional, Sequence

from config import defaults
from config.defaults import merge_table

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w]")


class CompoundSplitter:
    """
    Splits compound queries.

    Two passes:
    1. Split on conjunction words (whitespace-bounded) and on ``? ! ; ,``
    2. Inside each piece, start a new sub-query whenever a word maps to a
       sales-trigger category other than the one already open

    Example:
        "harga iphone dan beli samsung" →
        ["harga iphone", "beli samsung"]
    """

    def __init__(
        self,
        conjunctions: Optional[Sequence[str]] = None,
        sales_triggers: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        words = conjunctions if conjunctions is not None else defaults.CONJUNCTIONS
        alternatives = "|".join(re.escape(w) for w in words)
        pattern = r"[?!;]|,"
        if alternatives:
            pattern = rf"\s+(?:{alternatives})\s+|" + pattern
        self._pattern = re.compile(pattern, re.IGNORECASE)

        self._trigger_categories: Dict[str, str] = {}
        for category, triggers in merge_table(defaults.SALES_TRIGGERS, sales_triggers).items():
            for trigger in triggers:
                self._trigger_categories.setdefault(trigger.lower(), category)

    def split(self, query: str) -> List[str]:
        """
        Split a query into sub-queries.

        Args:
            query: Query after anaphora resolution

        Returns:
            Non-empty sub-queries in their original order
        """
        pieces = [p.strip() for p in self._pattern.split(query or "") if p and p.strip()]

        sub_queries: List[str] = []
        for piece in pieces:
            sub_queries.extend(self._split_on_triggers(piece))

        if len(sub_queries) > 1:
            logger.debug(f"Query split: '{query}' → {sub_queries}")
        return sub_queries

    def _split_on_triggers(self, piece: str) -> List[str]:
        refined: List[str] = []
        current: List[str] = []
        open_category: Optional[str] = None

        for word in piece.split():
            category = self._trigger_categories.get(_NON_WORD.sub("", word.lower()))
            if category and open_category and category != open_category and current:
                refined.append(" ".join(current))
                current = [word]
                open_category = category
            else:
                if category:
                    open_category = category
                current.append(word)

        if current:
            refined.append(" ".join(current))
        return refined
