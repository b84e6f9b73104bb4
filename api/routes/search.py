"""
Search API Routes.

``GET /search`` doubles as the remote retrieval contract: another engine
can list this endpoint in its ``remote_urls``.
"""

import logging
import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from ..services import get_services

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Request / Response Models ─────────────────────────────────────

class SearchResponse(BaseModel):
    query: str
    results: List[Dict[str, Any]] = []
    intent: str
    entities: Dict[str, bool] = {}
    confidence: int
    answer: Optional[str] = None
    sentiment: Optional[Dict[str, Any]] = None
    score_breakdown: Optional[Dict[str, float]] = None
    diagnostics: List[Dict[str, Any]] = []
    comparison: Optional[Dict[str, Any]] = None
    session_id: str
    processing_time_ms: float


class CompareRequest(BaseModel):
    query: str = Field(default="", max_length=2000)
    category: Optional[str] = None
    max_items: int = Field(default=4, ge=1, le=10)
    session_id: Optional[str] = None


class CatalogRequest(BaseModel):
    items: List[Dict[str, Any]] = Field(..., min_length=1)


class CatalogResponse(BaseModel):
    added: int
    total: int


def _engine():
    services = get_services()
    if not services.is_ready:
        raise HTTPException(status_code=503, detail="Search engine not initialized")
    return services.engine


# ── Endpoints ─────────────────────────────────────────────────────

@router.get("/search", response_model=SearchResponse)
async def search(
    q: str = Query(..., min_length=1, max_length=2000),
    session_id: str = Query(default="default", max_length=128),
    compare: bool = False,
):
    """Run a conversational search for one utterance."""
    engine = _engine()
    started = time.perf_counter()

    if compare:
        result = await engine.search_with_comparison(q, session_id=session_id)
    else:
        result = await engine.search(q, session_id=session_id)

    payload = result.to_dict()
    return SearchResponse(
        query=q,
        session_id=session_id,
        processing_time_ms=round((time.perf_counter() - started) * 1000, 2),
        **payload,
    )


@router.post("/compare")
async def compare(request: CompareRequest):
    """Compare products of a category, or the results of a query."""
    if not request.query and not request.category:
        raise HTTPException(status_code=422, detail="Either query or category is required")
    engine = _engine()
    comparison = await engine.compare_products(
        request.query,
        category=request.category,
        max_items=request.max_items,
        session_id=request.session_id,
    )
    return comparison.to_dict()


@router.post("/catalog", response_model=CatalogResponse)
async def add_catalog_items(request: CatalogRequest):
    """Append items to the catalog and rebuild the index."""
    engine = _engine()
    total = engine.add_data(request.items)
    return CatalogResponse(added=len(request.items), total=total)


@router.delete("/sessions/{session_id}")
async def reset_session(session_id: str):
    """Forget the conversation context of a session."""
    engine = _engine()
    if not engine.reset_session(session_id):
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return {"session_id": session_id, "status": "reset"}
