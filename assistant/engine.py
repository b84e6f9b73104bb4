"""
Public facade of the conversational search engine.

Wires the sub-engines together from an ``EngineConfig`` and exposes the
async search API with per-session conversation state.
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

import httpx

from config.engine_config import EngineConfig
from config.settings import get_settings
from conversation.context import ContextEngine, ConversationState
from conversation.sessions import DEFAULT_SESSION, SessionManager
from intent.orchestrator import IntentOrchestrator
from linguistics.preprocessor import PreprocessingEngine
from linguistics.providers import LanguageProvider, get_provider
from linguistics.sentiment import SentimentAnalyzer
from models.catalog import CatalogItem
from models.results import ComparisonResult, SearchResult
from retrieval.fuzzy_index import FuzzyIndex
from retrieval.remote import RemoteRetriever
from retrieval.scoring import ScoringEngine

from .comparison import ProductComparator
from .guard import SecurityGuard
from .middleware import MiddlewareManager, RequestMiddleware, ResponseMiddleware
from .orchestrator import QueryOrchestrator
from .response import ResponseComposer
from .splitter import CompoundSplitter

logger = logging.getLogger(__name__)

ItemLike = Union[CatalogItem, Dict[str, Any]]

_USE_DEFAULT_INDEX = object()


def _to_items(items: Iterable[ItemLike]) -> List[CatalogItem]:
    return [i if isinstance(i, CatalogItem) else CatalogItem.from_dict(i) for i in items]


class AssistantEngine:
    """
    Conversational search over a catalog.

    Usage:
        engine = AssistantEngine(items)
        result = await engine.search("harga iphone?", session_id="abc")

    Pass ``index_class=None`` to run without a retrieval index; every item
    is then scored and returned (degraded mode).
    """

    def __init__(
        self,
        items: Iterable[ItemLike],
        index_class: Optional[Any] = _USE_DEFAULT_INDEX,
        config: Optional[EngineConfig] = None,
        provider: Optional[LanguageProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the engine.

        Args:
            items: Catalog items (CatalogItem or dicts in wire format)
            index_class: Index factory ``(items, threshold=...)``; None disables indexing
            config: Engine overrides (defaults from Settings when None)
            provider: Language provider (from Settings.language when None)
            transport: httpx transport for remote retrieval
            clock: Time source for session and context expiry
        """
        self.config = config or EngineConfig()
        self.provider = provider or get_provider(get_settings().language)
        self.index_class = FuzzyIndex if index_class is _USE_DEFAULT_INDEX else index_class
        self._clock = clock
        cfg = self.config

        self.preprocessor = PreprocessingEngine(
            provider=self.provider,
            phonetic_map=cfg.phonetic_map,
            semantic_map=cfg.semantic_map,
            stop_words=cfg.stop_words,
            entity_definitions=cfg.entity_definitions,
            attribute_extractors=cfg.attribute_extractors,
            feature_patterns=cfg.feature_patterns,
            schema_fields=cfg.schema_fields,
        )
        self.intent = IntentOrchestrator(
            training_data=cfg.intent_training,
            intent_rules=cfg.intent_rules,
            sales_triggers=cfg.sales_triggers,
            chat_triggers=cfg.chat_triggers,
            contact_triggers=cfg.contact_triggers,
            threshold=cfg.classifier_threshold,
            fallback_threshold=cfg.classifier_fallback_threshold,
        )
        self.scoring = ScoringEngine(
            weights=cfg.weights,
            boosting_rules=cfg.boosting_rules,
            crawler_category=cfg.crawler_category,
        )
        self.middleware = MiddlewareManager()
        self.sessions = SessionManager(
            factory=self._new_context,
            idle_seconds=cfg.session_idle_seconds,
            prune_interval=cfg.session_prune_interval,
            clock=clock,
        )

        catalog = _to_items(items)
        self.orchestrator = QueryOrchestrator(
            preprocessor=self.preprocessor,
            intent_orchestrator=self.intent,
            scoring=self.scoring,
            composer=ResponseComposer(
                answer_templates=cfg.answer_templates,
                fallback_responses=cfg.fallback_responses,
                schema_fields=cfg.schema_fields,
                currency_symbol=cfg.currency_symbol,
                locale=cfg.locale,
            ),
            splitter=CompoundSplitter(
                conjunctions=cfg.conjunctions,
                sales_triggers=cfg.sales_triggers,
            ),
            guard=SecurityGuard(max_length=cfg.max_query_length, strict_mode=cfg.strict_mode),
            middleware=self.middleware,
            sentiment=SentimentAnalyzer(),
            comparator=ProductComparator(
                extract_attributes=self.preprocessor.extract_attributes,
                comparison_score=self.scoring.calculate_comparison_score,
                triggers=cfg.comparison_triggers,
                labels=cfg.comparison_labels,
                label_map=cfg.label_map,
            ),
            items=catalog,
            index=self._build_index(catalog),
            remote=RemoteRetriever(
                cfg.remote_urls,
                headers=cfg.remote_headers,
                timeout=cfg.remote_timeout,
                transport=transport,
            ),
            config=cfg,
        )
        logger.info(
            f"Engine ready: {len(catalog)} items, provider={self.provider.locale}, "
            f"index={'none' if self.index_class is None else self.index_class.__name__}"
        )

    def _new_context(self) -> ContextEngine:
        cfg = self.config
        return ContextEngine(
            reference_triggers=cfg.reference_triggers,
            ttl_seconds=cfg.context_ttl_seconds,
            max_interactions=cfg.max_interactions,
            lock_confidence=cfg.lock_confidence,
            unlock_confidence=cfg.unlock_confidence,
            anaphora_max_length=cfg.anaphora_max_length,
            clock=self._clock,
        )

    def _build_index(self, items: List[CatalogItem]) -> Optional[Any]:
        if self.index_class is None:
            return None
        return self.index_class(items, threshold=self.config.index_threshold)

    @property
    def items(self) -> List[CatalogItem]:
        return self.orchestrator.items

    async def init(self) -> None:
        """Warm up the language provider (loads the stemmer dictionary)."""
        init = getattr(self.provider, "init", None)
        if init is not None:
            await init()

    # ── Search ────────────────────────────────────────────────────

    async def search(self, text: Any, session_id: Optional[str] = None) -> SearchResult:
        async with self.sessions.acquire(session_id or DEFAULT_SESSION) as context:
            return await self.orchestrator.search(text, context, session_id or DEFAULT_SESSION)

    async def search_with_comparison(self, text: str, session_id: Optional[str] = None) -> SearchResult:
        async with self.sessions.acquire(session_id or DEFAULT_SESSION) as context:
            return await self.orchestrator.search_with_comparison(text, context)

    async def compare_products(
        self,
        text: str,
        category: Optional[str] = None,
        max_items: int = 4,
        session_id: Optional[str] = None,
    ) -> ComparisonResult:
        async with self.sessions.acquire(session_id or DEFAULT_SESSION) as context:
            return await self.orchestrator.compare_products(text, context, category, max_items)

    def is_comparison_query(self, text: Any) -> bool:
        return self.orchestrator.is_comparison_query(text)

    # ── Catalog & training ────────────────────────────────────────

    def add_data(self, items: Iterable[ItemLike]) -> int:
        """
        Append items and rebuild the index.

        The new index is built first and swapped in with the new catalog,
        so concurrent searches see either the old or the new catalog.

        Returns:
            Catalog size after the append
        """
        catalog = self.orchestrator.items + _to_items(items)
        self.orchestrator.swap_catalog(catalog, self._build_index(catalog))
        logger.info(f"Catalog updated: {len(catalog)} items")
        return len(catalog)

    def train_intent(self, text: str, label: str) -> None:
        self.intent.train(text, label)

    # ── Sessions & middleware ─────────────────────────────────────

    def get_context(self, session_id: Optional[str] = None) -> ConversationState:
        return self.sessions.get(session_id or DEFAULT_SESSION).get_state()

    def reset_session(self, session_id: str) -> bool:
        return self.sessions.reset(session_id)

    def use_request_middleware(self, middleware: RequestMiddleware) -> None:
        self.middleware.use_request(middleware)

    def use_response_middleware(self, middleware: ResponseMiddleware) -> None:
        self.middleware.use_response(middleware)
