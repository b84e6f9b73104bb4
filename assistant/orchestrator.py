"""
Query Orchestrator for the conversational search engine.

Coordinates the search pipeline from raw text to ranked, answered result:
security → middleware → anaphora → sentiment → compound split →
per sub-query (retrieval → intent → scoring → context → answer) → merge.
"""

import logging
import re
from dataclasses import replace
from typing import Any, List, Optional, Sequence, Tuple

from config.engine_config import EngineConfig
from conversation.context import ContextEngine
from intent.orchestrator import IntentOrchestrator
from linguistics.preprocessor import PreprocessingEngine, ProcessedQuery
from linguistics.sentiment import SentimentAnalyzer, SentimentResult
from models.catalog import CatalogItem
from models.results import ComparisonResult, ScoredCandidate, SearchResult
from retrieval.fuzzy_index import OR_SEPARATOR
from retrieval.remote import RemoteRetriever
from retrieval.scoring import ScoringEngine

from .comparison import ProductComparator
from .diagnostics import DiagnosticTracer
from .guard import SecurityGuard
from .middleware import MiddlewareManager
from .response import ResponseComposer
from .splitter import CompoundSplitter

logger = logging.getLogger(__name__)

BLOCKED_INTENT = "blocked"
COMPOUND_INTENT = "compound"
COMPARISON_INTENT = "comparison"
FUZZY_INTENT = "fuzzy"

# Retrieval distances assigned to candidates that did not come from the index
REMOTE_RETRIEVAL_SCORE = 0.5
CONTEXT_RETRIEVAL_SCORE = 0.1
DEGRADED_RETRIEVAL_SCORE = 1.0

# "..", "!." and "?." left behind when sub-answers are joined
_DOUBLED_STOP = re.compile(r"([.!?])\.")

Candidate = Tuple[CatalogItem, float]


class QueryOrchestrator:
    """
    Orchestrates one search call.

    Pipeline:
    1. Security check (rejects unsafe input)
    2. Request middleware (may rewrite or stop the query)
    3. Anaphora resolution against the conversation context
    4. Sentiment analysis
    5. Compound split into sub-queries
    6. Per sub-query: remote or local retrieval, context injection,
       intent detection, scoring, filtering, context update, answer
    7. Merge sub-results (compound) or return the single result
    8. Response middleware
    """

    def __init__(
        self,
        preprocessor: PreprocessingEngine,
        intent_orchestrator: IntentOrchestrator,
        scoring: ScoringEngine,
        composer: ResponseComposer,
        splitter: CompoundSplitter,
        guard: SecurityGuard,
        middleware: MiddlewareManager,
        sentiment: SentimentAnalyzer,
        comparator: ProductComparator,
        items: Sequence[CatalogItem],
        index: Optional[Any] = None,
        remote: Optional[RemoteRetriever] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.preprocessor = preprocessor
        self.intent = intent_orchestrator
        self.scoring = scoring
        self.composer = composer
        self.splitter = splitter
        self.guard = guard
        self.middleware = middleware
        self.sentiment = sentiment
        self.comparator = comparator
        self.remote = remote
        self.config = config or EngineConfig()
        self._catalog: Tuple[List[CatalogItem], Optional[Any]] = (list(items), index)

    @property
    def items(self) -> List[CatalogItem]:
        return self._catalog[0]

    @property
    def index(self) -> Optional[Any]:
        return self._catalog[1]

    def swap_catalog(self, items: Sequence[CatalogItem], index: Optional[Any]) -> None:
        """Replace catalog and index in one assignment."""
        self._catalog = (list(items), index)

    # ── Entry points ──────────────────────────────────────────────

    async def search(self, query: Any, context: ContextEngine, session_id: str = "") -> SearchResult:
        """
        Run the full pipeline for one utterance.

        Args:
            query: Raw user text
            context: Conversation context of the session
            session_id: Session id, forwarded to middleware

        Returns:
            SearchResult with diagnostics attached
        """
        if not isinstance(query, str) or not query.strip():
            return SearchResult(intent=FUZZY_INTENT)

        tracer = DiagnosticTracer()

        tracer.start("security_check")
        check = self.guard.process(query)
        tracer.stop("security_check", {"is_valid": check.is_valid, "threats": check.threats})
        if not check.is_valid:
            return SearchResult(
                intent=BLOCKED_INTENT,
                answer=self.composer.templates["blocked"],
                diagnostics=tracer.events,
            )

        tracer.start("middleware_request")
        ctx = await self.middleware.execute_request(check.sanitized, session_id)
        tracer.stop("middleware_request", {"stopped": ctx.stop})
        if ctx.stop:
            return SearchResult(intent=BLOCKED_INTENT, diagnostics=tracer.events)
        if not isinstance(ctx.query, str) or not ctx.query.strip():
            return SearchResult(intent=FUZZY_INTENT, diagnostics=tracer.events)

        tracer.start("anaphora_resolution")
        enriched = context.resolve_anaphora(ctx.query)
        tracer.stop("anaphora_resolution", {"resolved": enriched != ctx.query})

        tracer.start("sentiment_analysis")
        sentiment = self.sentiment.analyze(query)
        tracer.stop("sentiment_analysis", {"label": sentiment.label, "is_urgent": sentiment.is_urgent})

        sub_queries = self.splitter.split(enriched) or [enriched]
        tracer.record("compound_split", {"sub_queries": sub_queries})

        if len(sub_queries) > 1:
            partials = []
            for sub_query in sub_queries:
                partials.append(await self._sub_search(sub_query, context, tracer, sentiment))
            result = self._merge(partials)
        else:
            result = await self._sub_search(enriched, context, tracer, sentiment)

        result.sentiment = sentiment.to_dict()

        tracer.start("middleware_response")
        result = await self.middleware.execute_response(result, ctx)
        tracer.stop("middleware_response")

        result.diagnostics = tracer.events
        logger.debug(
            f"Search '{query}' → intent={result.intent} results={len(result.results)} "
            f"confidence={result.confidence}"
        )
        return result

    def is_comparison_query(self, query: Any) -> bool:
        return self.comparator.is_comparison_query(query)

    async def compare_products(
        self,
        query: str,
        context: ContextEngine,
        category: Optional[str] = None,
        max_items: int = 4,
    ) -> ComparisonResult:
        """Compare items of a category, or the results of searching ``query``."""
        if category:
            wanted = category.lower()
            candidates = [i for i in self.items if wanted in (i.category or "").lower()]
        else:
            candidates = (await self.search(query, context)).results
        return self.comparator.compare(candidates, max_items)

    async def search_with_comparison(self, query: str, context: ContextEngine) -> SearchResult:
        """Search, and attach a comparison table when the query asks for one."""
        result = await self.search(query, context)
        if not self.comparator.is_comparison_query(query):
            return result

        comparison = self.comparator.compare(result.results, max_items=4)
        result.comparison = comparison
        result.intent = COMPARISON_INTENT
        result.answer = self.comparator.summary(comparison)
        return result

    # ── Sub-search ────────────────────────────────────────────────

    async def _sub_search(
        self,
        query: str,
        context: ContextEngine,
        tracer: DiagnosticTracer,
        sentiment: SentimentResult,
    ) -> SearchResult:
        remote_response = None
        if self.remote is not None and self.remote.enabled:
            tracer.start("remote_retrieval")
            remote_response = await self.remote.fetch(query)
            tracer.stop("remote_retrieval", {
                "hits": len(remote_response.items) if remote_response else 0,
            })

        tracer.start("preprocessing")
        processed = self.preprocessor.process(query)
        if sentiment.is_urgent and not processed.signals.is_urgent:
            processed = replace(processed, signals=replace(processed.signals, is_urgent=True))
        tracer.stop("preprocessing", {
            "tokens": list(processed.tokens),
            "is_question": processed.signals.is_question,
            "is_urgent": processed.signals.is_urgent,
        })

        tracer.start("retrieval")
        degraded = False
        if remote_response is not None:
            candidates = [(item, REMOTE_RETRIEVAL_SCORE) for item in remote_response.items]
            source = "remote"
        else:
            candidates, degraded = self._retrieve_local(processed)
            source = "degraded" if degraded else "local"

        state = context.get_state()
        injected = self._inject_context_item(candidates, state.subject)
        tracer.stop("retrieval", {
            "source": source,
            "candidates": len(candidates),
            "context_injected": injected,
        })

        tracer.start("intent_detection")
        tokens = list(processed.tokens)
        stems = [self.preprocessor.stem(t) for t in tokens]
        intent = self.intent.detect(" ".join(tokens), tokens, stems, processed.entities)
        if remote_response is not None and remote_response.intent != FUZZY_INTENT:
            intent = remote_response.intent
        tracer.stop("intent_detection", {"intent": intent})

        tracer.start("scoring")
        scored = []
        for item, retrieval_score in candidates:
            outcome = self.scoring.calculate(item, processed, retrieval_score, intent, state)
            scored.append(ScoredCandidate(item=item, score=outcome.score, breakdown=outcome.breakdown))
        scored.sort(key=lambda c: c.score, reverse=True)

        is_conversational = intent.startswith("chat_")
        if degraded:
            kept = scored
        else:
            floor = self.config.min_score_conversational if is_conversational else self.config.min_score
            kept = [c for c in scored if c.score > floor]
        kept = kept[:self.config.result_limit]

        if kept:
            confidence = max(0, min(round(kept[0].score * 2), 100))
        else:
            confidence = 80 if is_conversational else 0
        tracer.stop("scoring", {"scored": len(scored), "kept": len(kept)})

        entities = dict(processed.entities)
        if remote_response is not None:
            entities.update(remote_response.entities)

        result = SearchResult(
            results=[c.item for c in kept],
            intent=intent,
            entities=entities,
            confidence=confidence,
            score_breakdown=kept[0].breakdown if kept else None,
            scored=kept,
        )
        context.update(result)

        tracer.start("response_composition")
        try:
            result.answer = self.composer.compose(
                result, intent, is_conversational, self.preprocessor.extract_attributes
            )
        except (KeyError, ValueError, IndexError, AttributeError) as e:
            logger.error(f"Response composition failed for '{query}': {e}")
            result.answer = None
        tracer.stop("response_composition", {"answered": result.answer is not None})

        return result

    def _retrieve_local(self, processed: ProcessedQuery) -> Tuple[List[Candidate], bool]:
        items, index = self._catalog
        if index is None:
            return [(item, DEGRADED_RETRIEVAL_SCORE) for item in items], True
        if not processed.expanded:
            return [], False

        try:
            hits = index.search(OR_SEPARATOR.join(processed.expanded))
        except Exception as e:
            logger.error(f"Index search failed, falling back to full catalog: {e}")
            return [(item, DEGRADED_RETRIEVAL_SCORE) for item in items], True

        return [(hit.item, hit.score) for hit in hits], False

    def _inject_context_item(self, candidates: List[Candidate], subject: Optional[str]) -> bool:
        """Add the remembered item to the candidates when retrieval missed it."""
        if not subject or any(item.item_id == subject for item, _ in candidates):
            return False
        for item in self.items:
            if item.item_id == subject:
                candidates.append((item, CONTEXT_RETRIEVAL_SCORE))
                return True
        return False

    def _merge(self, partials: List[SearchResult]) -> SearchResult:
        seen = set()
        results: List[CatalogItem] = []
        scored: List[ScoredCandidate] = []
        for partial in partials:
            for candidate in partial.scored:
                if candidate.item.title in seen:
                    continue
                seen.add(candidate.item.title)
                results.append(candidate.item)
                scored.append(candidate)

        entities = {}
        for partial in partials:
            for name, present in partial.entities.items():
                entities[name] = entities.get(name, False) or present

        answers = [p.answer for p in partials if p.answer]
        answer = _DOUBLED_STOP.sub(r"\1", self.config.sub_search_joiner.join(answers)) if answers else None

        breakdown = next((p.score_breakdown for p in partials if p.score_breakdown), None)
        limit = self.config.result_limit

        return SearchResult(
            results=results[:limit],
            intent=COMPOUND_INTENT,
            entities=entities,
            confidence=max(p.confidence for p in partials),
            answer=answer,
            score_breakdown=breakdown,
            scored=scored[:limit],
        )
