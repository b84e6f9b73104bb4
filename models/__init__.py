"""
Data models for the conversational search engine.
"""

from .catalog import CatalogItem
from .results import (
    ComparisonItem,
    ComparisonResult,
    Recommendation,
    ScoredCandidate,
    SearchResult,
)

__all__ = [
    "CatalogItem",
    "ComparisonItem",
    "ComparisonResult",
    "Recommendation",
    "ScoredCandidate",
    "SearchResult",
]
