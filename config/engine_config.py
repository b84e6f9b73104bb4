"""
Per-engine configuration.

``EngineConfig`` carries every caller-level override: lookup tables,
custom rules, scoring weights and numeric knobs. Numeric defaults come
from ``Settings`` so they can be tuned through the environment.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from config.rules import BoostingRule, IntentRule
from config.settings import get_settings


def _setting(name: str):
    return lambda: getattr(get_settings(), name)


class ScoringWeights(BaseModel):
    """Magnitudes for every additive scoring term."""
    retrieval: float = 10.0
    token_match: float = 10.0
    sequence_bonus: float = 8.0
    title_similarity: float = 15.0
    title_similarity_threshold: float = 0.4
    title_hit: float = 25.0
    category_hit: float = 25.0
    context_category: float = 10.0
    context_item: float = 30.0
    recommended: float = 30.0
    urgency: float = 10.0
    stock: float = 25.0
    sales_price: float = 30.0
    sales_category: float = 20.0
    crawler_penalty: float = -30.0
    stock_pattern: str = r"stok|ready|cabang|stock"
    sales_category_pattern: str = r"produk|layanan|product|service"

    # Comparison
    comparison_recommended: float = 50.0
    comparison_rating: float = 10.0
    comparison_discount: float = 100.0
    comparison_attribute: float = 5.0


class EngineConfig(BaseModel):
    """Caller overrides merged over the defaults in ``config.defaults``."""

    # Lookup tables (merged shallowly over defaults)
    phonetic_map: Dict[str, List[str]] = Field(default_factory=dict)
    semantic_map: Dict[str, List[str]] = Field(default_factory=dict)
    stop_words: Optional[List[str]] = None  # replaces provider defaults entirely
    entity_definitions: Dict[str, List[str]] = Field(default_factory=dict)
    sales_triggers: Dict[str, List[str]] = Field(default_factory=dict)
    chat_triggers: Dict[str, List[str]] = Field(default_factory=dict)
    contact_triggers: Optional[List[str]] = None
    reference_triggers: Optional[List[str]] = None
    conjunctions: Optional[List[str]] = None
    feature_patterns: Optional[List[str]] = None
    attribute_extractors: Dict[str, str] = Field(default_factory=dict)
    schema_fields: Dict[str, str] = Field(default_factory=dict)
    answer_templates: Dict[str, str] = Field(default_factory=dict)
    fallback_responses: Dict[str, str] = Field(default_factory=dict)
    comparison_triggers: Optional[List[str]] = None
    comparison_labels: Dict[str, str] = Field(default_factory=dict)
    label_map: Dict[str, str] = Field(default_factory=dict)
    intent_training: Optional[Dict[str, List[str]]] = None  # None → default phrases

    # Rules
    intent_rules: List[IntentRule] = Field(default_factory=list)
    boosting_rules: List[BoostingRule] = Field(default_factory=list)
    weights: ScoringWeights = Field(default_factory=ScoringWeights)

    # Numeric knobs
    locale: str = Field(default_factory=_setting("locale"))
    currency_symbol: str = Field(default_factory=_setting("currency_symbol"))
    result_limit: int = Field(default_factory=_setting("result_limit"))
    sub_search_joiner: str = Field(default_factory=_setting("sub_search_joiner"))
    min_score: float = Field(default_factory=_setting("min_score"))
    min_score_conversational: float = Field(default_factory=_setting("min_score_conversational"))
    index_threshold: float = Field(default_factory=_setting("index_threshold"))
    classifier_threshold: float = Field(default_factory=_setting("classifier_threshold"))
    classifier_fallback_threshold: float = Field(
        default_factory=_setting("classifier_fallback_threshold")
    )
    context_ttl_seconds: float = Field(default_factory=_setting("context_ttl_seconds"))
    max_interactions: int = Field(default_factory=_setting("max_interactions"))
    lock_confidence: int = Field(default_factory=_setting("lock_confidence"))
    unlock_confidence: int = Field(default_factory=_setting("unlock_confidence"))
    anaphora_max_length: int = Field(default_factory=_setting("anaphora_max_length"))
    session_idle_seconds: float = Field(default_factory=_setting("session_idle_seconds"))
    session_prune_interval: float = Field(default_factory=_setting("session_prune_interval"))
    crawler_category: str = Field(default_factory=_setting("crawler_category"))

    # Remote retrieval
    remote_urls: List[str] = Field(default_factory=_setting("remote_urls"))
    remote_headers: Dict[str, str] = Field(default_factory=_setting("remote_headers"))
    remote_timeout: float = Field(default_factory=_setting("remote_timeout"))

    # Security
    max_query_length: int = Field(default_factory=_setting("max_query_length"))
    strict_mode: bool = Field(default_factory=_setting("strict_mode"))
