"""
Intent Module for the conversational search engine.

- Naive Bayes intent classifier
- Hybrid rule + classifier orchestration
"""

from .classifier import ClassificationResult, NaiveBayesClassifier, UNKNOWN_INTENT
from .orchestrator import CONTACT_INTENT, FUZZY_INTENT, IntentOrchestrator

__all__ = [
    "ClassificationResult",
    "NaiveBayesClassifier",
    "UNKNOWN_INTENT",
    "CONTACT_INTENT",
    "FUZZY_INTENT",
    "IntentOrchestrator",
]
