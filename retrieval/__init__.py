"""
Retrieval Module for the conversational search engine.

This module provides candidate retrieval and ranking:
- Fuzzy in-memory catalog index
- Remote HTTP search endpoints
- Multi-factor relevance scoring
"""

from .fuzzy_index import FuzzyIndex, IndexHit, OR_SEPARATOR
from .remote import RemoteResponse, RemoteRetriever
from .scoring import ScoreResult, ScoringEngine, dice_coefficient

__all__ = [
    "FuzzyIndex",
    "IndexHit",
    "OR_SEPARATOR",
    "RemoteResponse",
    "RemoteRetriever",
    "ScoreResult",
    "ScoringEngine",
    "dice_coefficient",
]
