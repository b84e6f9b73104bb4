"""
Rule-based sentiment analysis for Indonesian and English chat text.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from config import defaults
from config.defaults import merge_table

logger = logging.getLogger(__name__)

_REPEATED_CHAR = re.compile(r"(.)\1{2,}")
_SHOUTING = re.compile(r"[A-Z]{2,}")


@dataclass
class SentimentResult:
    """Sentiment of one utterance."""
    score: int = 0  # -100..100
    label: str = "neutral"  # positive | negative | neutral
    is_urgent: bool = False
    intensity: str = "low"  # low | medium | high
    details: Dict[str, List[str]] = field(default_factory=lambda: {
        "positive_words": [], "negative_words": [], "intensifiers": [],
    })

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "label": self.label,
            "is_urgent": self.is_urgent,
            "intensity": self.intensity,
        }


class SentimentAnalyzer:
    """
    Lexicon sentiment scorer.

    Two-word phrases are checked before single words. A negator flips the
    polarity of the next scored word; intensifiers, exclamation marks,
    shouting and letter repetition scale the final score.
    """

    def __init__(
        self,
        positive_words: Optional[Mapping[str, float]] = None,
        negative_words: Optional[Mapping[str, float]] = None,
        intensifiers: Optional[Mapping[str, float]] = None,
        negators: Optional[Sequence[str]] = None,
        urgency_words: Optional[Sequence[str]] = None,
    ):
        self.positive_words = merge_table(defaults.POSITIVE_WORDS, positive_words)
        self.negative_words = merge_table(defaults.NEGATIVE_WORDS, negative_words)
        self.intensifiers = merge_table(defaults.INTENSIFIERS, intensifiers)
        self.negators = set(defaults.NEGATORS) | set(negators or ())
        self.urgency_words = list(defaults.URGENCY_WORDS) + list(urgency_words or ())

    def analyze(self, text: Any) -> SentimentResult:
        if not isinstance(text, str) or not text.strip():
            return SentimentResult()

        clean = text.lower()
        words = clean.split()
        exclamations = text.count("!")

        is_urgent = any(w in clean for w in self.urgency_words) or exclamations >= 2

        multiplier = 1.0
        if exclamations:
            multiplier *= 1 + exclamations * 0.15
        if _SHOUTING.search(text):
            multiplier *= 1.2
        if _REPEATED_CHAR.search(text):
            multiplier *= 1.3

        positive = negative = 0.0
        found_pos: List[str] = []
        found_neg: List[str] = []
        found_int: List[str] = []
        negate_next = False

        i = 0
        while i < len(words):
            word = words[i]
            next_word = words[i + 1] if i + 1 < len(words) else ""
            pair = f"{word} {next_word}"

            if word in self.negators:
                negate_next = True
                i += 1
                continue

            if word in self.intensifiers:
                multiplier *= self.intensifiers[word]
                found_int.append(word)
                i += 1
                continue

            matched, weight, is_positive = None, 0.0, False
            if pair in self.positive_words:
                matched, weight, is_positive = pair, self.positive_words[pair], True
                i += 1
            elif pair in self.negative_words:
                matched, weight = pair, self.negative_words[pair]
                i += 1
            elif word in self.positive_words:
                matched, weight, is_positive = word, self.positive_words[word], True
            elif word in self.negative_words:
                matched, weight = word, self.negative_words[word]

            if matched:
                if negate_next:
                    is_positive = not is_positive
                    matched = f"not {matched}"
                    negate_next = False
                if is_positive:
                    positive += weight
                    found_pos.append(matched)
                else:
                    negative += weight
                    found_neg.append(matched)
            i += 1

        score = max(-100.0, min(100.0, (positive - negative) * multiplier * 10))

        label = "neutral"
        if score > 10:
            label = "positive"
        elif score < -10:
            label = "negative"

        intensity = "low"
        if abs(score) > 40:
            intensity = "high"
        elif abs(score) > 20:
            intensity = "medium"

        return SentimentResult(
            score=round(score),
            label=label,
            is_urgent=is_urgent,
            intensity=intensity,
            details={
                "positive_words": found_pos,
                "negative_words": found_neg,
                "intensifiers": found_int,
            },
        )

    def priority(self, text: str) -> int:
        """Support priority 1 (lowest) to 5 derived from sentiment."""
        result = self.analyze(text)
        if result.label == "negative" and (result.is_urgent or result.intensity == "high"):
            return 5
        if result.is_urgent:
            return 4
        if result.label == "negative":
            return 4 if result.intensity == "medium" else 3
        if result.label == "neutral":
            return 2
        return 1
