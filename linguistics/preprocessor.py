"""
Query Preprocessor for the conversational search engine.

Normalizes, corrects, stems and expands raw user queries before they are
handed to retrieval, intent detection and scoring. Handles informal
Indonesian (slang spellings, affixed words) through the language provider
and the phonetic/semantic tables.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from config import defaults
from config.defaults import merge_table
from models.catalog import CatalogItem

from .providers import IndonesianProvider, LanguageProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuerySignals:
    """Surface signals read from the raw query."""
    is_question: bool = False
    is_urgent: bool = False


@dataclass(frozen=True)
class ProcessedQuery:
    """
    Immutable output of ``PreprocessingEngine.process``.

    ``tokens`` holds the filtered corrected+stemmed forms. ``expanded``
    adds semantic synonyms and is what retrieval searches with.
    """
    original: str = ""
    tokens: Tuple[str, ...] = ()
    expanded: Tuple[str, ...] = ()
    entities: Dict[str, bool] = field(default_factory=dict)
    signals: QuerySignals = field(default_factory=QuerySignals)

    @property
    def is_empty(self) -> bool:
        return not self.tokens


def _dedupe(words: Iterable[str]) -> List[str]:
    seen = set()
    ordered = []
    for w in words:
        if w and w not in seen:
            seen.add(w)
            ordered.append(w)
    return ordered


class PreprocessingEngine:
    """
    Turns raw text into a ``ProcessedQuery``.

    Pipeline:
    1. Signals (question mark, exclamation mark)
    2. Provider normalization, whitespace split, drop 1-char tokens
    3. Phonetic correction (first canonical form wins)
    4. Stemming, union with corrected forms
    5. Stop-word removal
    6. Keyword entity detection
    7. Semantic expansion
    """

    def __init__(
        self,
        provider: Optional[LanguageProvider] = None,
        phonetic_map: Optional[Mapping[str, Sequence[str]]] = None,
        semantic_map: Optional[Mapping[str, Sequence[str]]] = None,
        stop_words: Optional[Sequence[str]] = None,
        entity_definitions: Optional[Mapping[str, Sequence[str]]] = None,
        attribute_extractors: Optional[Mapping[str, str]] = None,
        feature_patterns: Optional[Sequence[str]] = None,
        schema_fields: Optional[Mapping[str, str]] = None,
    ):
        """
        Initialize the preprocessor.

        Args:
            provider: Language provider (Indonesian by default)
            phonetic_map: Canonical word → variants, merged over defaults
            semantic_map: Word → synonyms, merged over defaults
            stop_words: Replaces the provider's stop words when given
            entity_definitions: Entity name → keyword list
            attribute_extractors: Attribute → regex with one capture group
            feature_patterns: Regexes whose captures form the feature list
            schema_fields: Overrides for attribute keys of schema fields
        """
        self.provider = provider or IndonesianProvider()
        self.phonetic_map = merge_table(defaults.PHONETIC_MAP, phonetic_map)
        self.semantic_map = merge_table(defaults.SEMANTIC_MAP, semantic_map)
        self.entity_definitions = merge_table(defaults.ENTITY_DEFINITIONS, entity_definitions)
        self.schema = merge_table(defaults.SCHEMA, schema_fields)

        if stop_words is not None:
            self.stop_words = set(w.lower() for w in stop_words)
        else:
            self.stop_words = set(self.provider.get_stop_words())

        self._extractors = {
            name: re.compile(pattern, re.IGNORECASE)
            for name, pattern in merge_table(defaults.ATTRIBUTE_EXTRACTORS, attribute_extractors).items()
        }
        self._feature_patterns = [
            re.compile(p, re.IGNORECASE)
            for p in (feature_patterns if feature_patterns is not None else defaults.FEATURE_PATTERNS)
        ]

        # variant → canonical, first canonical wins
        self._variant_index: Dict[str, str] = {}
        for canonical, variants in self.phonetic_map.items():
            for variant in variants:
                self._variant_index.setdefault(variant.lower(), canonical)

    def process(self, query: Any) -> ProcessedQuery:
        """
        Full preprocessing pipeline.

        Args:
            query: Raw user text

        Returns:
            ProcessedQuery (empty for non-string or blank input)
        """
        if not isinstance(query, str) or not query.strip():
            return ProcessedQuery(original=query if isinstance(query, str) else "")

        signals = QuerySignals(is_question="?" in query, is_urgent="!" in query)

        words = [w for w in self.provider.normalize(query).split() if len(w) > 1]
        corrected = [self.auto_correct(w) for w in words]
        stemmed = [self.stem(w) for w in corrected]
        working = _dedupe(corrected + stemmed)

        tokens = [t for t in working if t not in self.stop_words]
        entities = self.extract_entities(tokens)

        expansions: List[str] = []
        for token in tokens:
            expansions.extend(self.semantic_map.get(token, ()))
            root = self.stem(token)
            if root != token:
                expansions.extend(self.semantic_map.get(root, ()))

        expanded = _dedupe(tokens + [e.lower() for e in expansions])

        logger.debug(f"Query processed: '{query}' → tokens={tokens} expanded={expanded}")

        return ProcessedQuery(
            original=query,
            tokens=tuple(tokens),
            expanded=tuple(expanded),
            entities=entities,
            signals=signals,
        )

    def auto_correct(self, word: str) -> str:
        """Map a slang/misspelled variant to its canonical form."""
        lowered = word.lower()
        if lowered in self.phonetic_map:
            return lowered
        return self._variant_index.get(lowered, lowered)

    def stem(self, word: str) -> str:
        return self.provider.stem(word)

    def extract_entities(self, tokens: Iterable[str]) -> Dict[str, bool]:
        token_set = set(tokens)
        return {
            name: any(k.lower() in token_set for k in keywords)
            for name, keywords in self.entity_definitions.items()
        }

    def extract_attributes(self, item: CatalogItem) -> Dict[str, Any]:
        """
        Collect comparable attributes for an item.

        Pre-set ``item.attributes`` always win. Schema fields are passed
        through next, then regex extractors run over the item's content
        (or description), then the feature-list pass.
        """
        attributes: Dict[str, Any] = dict(item.attributes)
        schema = self.schema

        passthrough = [
            (schema["PRICE"], item.price),
            (schema["PRICE_PROMO"], item.sale_price),
            (schema["BADGE"], item.badge),
            (schema["RATING"], item.rating),
        ]
        for key, value in passthrough:
            if value is not None and key not in attributes:
                attributes[key] = value
        attributes.setdefault(schema["RECOMMENDED"], bool(item.is_recommended))

        text = item.content or item.description or ""
        for name, pattern in self._extractors.items():
            if attributes.get(name):
                continue
            match = pattern.search(text)
            if match:
                attributes[name] = match.group(1).strip()

        features_key = schema["FEATURES"]
        if not attributes.get(features_key):
            found: List[str] = []
            for pattern in self._feature_patterns:
                for match in pattern.finditer(text):
                    value = match.group(1).strip()
                    if value:
                        found.append(value)
            if found:
                attributes[features_key] = ", ".join(_dedupe(found))

        return attributes
