"""
Remote retrieval over HTTP search endpoints.

Each endpoint is called as ``GET <url>?q=<query>`` and must answer with
``{"results": [...], "intent": ..., "entities": {...}}`` (the same shape
served by ``/api/v1/search``) or a bare list of items.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import httpx

from models.catalog import CatalogItem

logger = logging.getLogger(__name__)


@dataclass
class RemoteResponse:
    """Merged answer of all remote endpoints."""
    items: List[CatalogItem] = field(default_factory=list)
    intent: str = "fuzzy"
    entities: Dict[str, bool] = field(default_factory=dict)


class RemoteRetriever:
    """Queries remote search endpoints concurrently and merges their items."""

    def __init__(
        self,
        urls: Sequence[str],
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the retriever.

        Args:
            urls: Endpoint URLs
            headers: Headers sent with every request
            timeout: Per-request timeout in seconds
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.urls = list(urls)
        self.headers = dict(headers or {})
        self.timeout = timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.urls)

    async def fetch(self, query: str) -> Optional[RemoteResponse]:
        """
        Fetch and merge results from every endpoint.

        Returns:
            Merged response, or None when every endpoint failed or
            returned no items
        """
        if not self.urls:
            return None

        async with httpx.AsyncClient(
            headers=self.headers, timeout=self.timeout, transport=self.transport
        ) as client:
            payloads = await asyncio.gather(
                *(self._fetch_one(client, url, query) for url in self.urls)
            )

        merged = RemoteResponse()
        for payload in payloads:
            results = payload.get("results")
            for raw in results if isinstance(results, list) else []:
                item = self._parse_item(raw)
                if item is not None:
                    merged.items.append(item)
            intent = payload.get("intent")
            if isinstance(intent, str) and intent and intent != "fuzzy":
                merged.intent = intent
            entities = payload.get("entities")
            if isinstance(entities, dict):
                merged.entities.update({str(k): bool(v) for k, v in entities.items()})

        if not merged.items:
            logger.info(f"Remote retrieval returned nothing for '{query}', using local index")
            return None
        return merged

    @staticmethod
    def _parse_item(raw: Any) -> Optional[CatalogItem]:
        if not isinstance(raw, dict):
            logger.warning(f"Skipping remote item of type {type(raw).__name__}")
            return None
        try:
            item = CatalogItem.from_dict(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping unparseable remote item: {e}")
            return None
        if not item.title:
            logger.warning("Skipping remote item without a title")
            return None
        return item

    async def _fetch_one(self, client: httpx.AsyncClient, url: str, query: str) -> Dict[str, Any]:
        try:
            response = await client.get(url, params={"q": query})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Remote endpoint {url} failed: {e}")
            return {}

        if isinstance(data, list):
            return {"results": data}
        if isinstance(data, dict):
            return data
        logger.warning(f"Remote endpoint {url} returned unexpected payload type {type(data).__name__}")
        return {}
