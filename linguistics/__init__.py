"""
Linguistics Module for the conversational search engine.

- Language providers (Indonesian via Sastrawi, English)
- Query preprocessing (correction, stemming, expansion)
- Sentiment analysis
"""

from .providers import EnglishProvider, IndonesianProvider, LanguageProvider, get_provider
from .preprocessor import PreprocessingEngine, ProcessedQuery, QuerySignals
from .sentiment import SentimentAnalyzer, SentimentResult

__all__ = [
    "EnglishProvider",
    "IndonesianProvider",
    "LanguageProvider",
    "get_provider",
    "PreprocessingEngine",
    "ProcessedQuery",
    "QuerySignals",
    "SentimentAnalyzer",
    "SentimentResult",
]
