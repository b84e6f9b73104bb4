"""
Request/response interceptors around the search pipeline.

A middleware is an async callable that receives the context (and, for
responses, the result) plus ``call_next``. It may edit the query, set
``ctx.stop`` to short-circuit the search, or decorate the result.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List

from models.results import SearchResult

logger = logging.getLogger(__name__)


@dataclass
class MiddlewareContext:
    query: str
    original_query: str
    session_id: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)
    stop: bool = False


CallNext = Callable[[], Awaitable[None]]
RequestMiddleware = Callable[[MiddlewareContext, CallNext], Awaitable[None]]
ResponseMiddleware = Callable[[SearchResult, MiddlewareContext, CallNext], Awaitable[None]]


class MiddlewareManager:
    """Runs request and response middleware chains in registration order."""

    def __init__(self):
        self._request: List[RequestMiddleware] = []
        self._response: List[ResponseMiddleware] = []

    def use_request(self, middleware: RequestMiddleware) -> None:
        self._request.append(middleware)

    def use_response(self, middleware: ResponseMiddleware) -> None:
        self._response.append(middleware)

    async def execute_request(self, query: str, session_id: str = "") -> MiddlewareContext:
        ctx = MiddlewareContext(query=query, original_query=query, session_id=session_id)

        async def invoke(middleware, call_next):
            await middleware(ctx, call_next)

        await self._run(self._request, invoke, lambda: ctx.stop, "Request")
        return ctx

    async def execute_response(self, result: SearchResult, ctx: MiddlewareContext) -> SearchResult:
        async def invoke(middleware, call_next):
            await middleware(result, ctx, call_next)

        await self._run(self._response, invoke, lambda: False, "Response")
        return result

    @staticmethod
    async def _run(chain: List[Callable], invoke, stopped: Callable[[], bool], kind: str) -> None:
        # A failing middleware is skipped; the chain continues unless it
        # already handed control to the next one.
        async def run(index: int) -> None:
            if index >= len(chain) or stopped():
                return
            forwarded = False

            async def call_next() -> None:
                nonlocal forwarded
                forwarded = True
                await run(index + 1)

            try:
                await invoke(chain[index], call_next)
            except Exception as e:
                logger.error(f"{kind} middleware #{index} failed: {e}")
                if not forwarded:
                    await run(index + 1)

        await run(0)
