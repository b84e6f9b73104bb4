"""
Statistical intent classification.

Multinomial Naive Bayes over bag-of-words with Laplace smoothing. Trained
in-process from short example phrases; no model files.
"""

import logging
import math
import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping

logger = logging.getLogger(__name__)

UNKNOWN_INTENT = "unknown"

_NON_WORD = re.compile(r"[^\w\s]")


@dataclass
class ClassificationResult:
    """Result of intent classification."""
    intent: str = UNKNOWN_INTENT
    confidence: float = 0.0
    all_scores: Dict[str, float] = field(default_factory=dict)


def tokenize(text: str) -> List[str]:
    """Lowercase, strip punctuation, keep words longer than two characters."""
    return [w for w in _NON_WORD.sub("", text.lower()).split() if len(w) > 2]


class NaiveBayesClassifier:
    """
    Classifies text into intent labels.

    Score per label is the log prior plus the sum of log Laplace-smoothed
    word likelihoods. ``confidence`` is the largest softmax weight over
    those log scores. It is a ranking heuristic used against fixed
    thresholds, not a calibrated posterior probability.
    """

    def __init__(self):
        self._word_counts: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
        self._word_totals: Dict[str, int] = defaultdict(int)
        self._doc_counts: Dict[str, int] = defaultdict(int)
        self._vocabulary = set()
        self._total_docs = 0

    @property
    def labels(self) -> List[str]:
        return list(self._doc_counts)

    def train(self, text: str, label: str) -> None:
        self._doc_counts[label] += 1
        self._total_docs += 1
        for word in tokenize(text):
            self._word_counts[label][word] += 1
            self._word_totals[label] += 1
            self._vocabulary.add(word)

    def train_data(self, data: Mapping[str, Iterable[str]]) -> None:
        """Bulk training from label → example phrases."""
        for label, phrases in data.items():
            for phrase in phrases:
                self.train(phrase, label)
        logger.debug(
            f"Classifier trained: {len(self._doc_counts)} labels, "
            f"{len(self._vocabulary)} words"
        )

    def classify(self, text: str) -> ClassificationResult:
        """
        Classify a piece of text.

        Args:
            text: Raw text

        Returns:
            ClassificationResult; ``("unknown", 0.0)`` when untrained
        """
        if self._total_docs == 0:
            return ClassificationResult()

        words = tokenize(text) if isinstance(text, str) else []
        vocab_size = len(self._vocabulary)

        log_scores: Dict[str, float] = {}
        for label, docs in self._doc_counts.items():
            denominator = self._word_totals[label] + vocab_size
            score = math.log(docs / self._total_docs)
            counts = self._word_counts[label]
            for word in words:
                if denominator > 0:
                    score += math.log((counts.get(word, 0) + 1) / denominator)
            log_scores[label] = score

        best = max(log_scores, key=log_scores.get)
        top = log_scores[best]
        exp_sum = sum(math.exp(s - top) for s in log_scores.values())
        confidence = 1.0 / exp_sum

        return ClassificationResult(intent=best, confidence=confidence, all_scores=log_scores)
