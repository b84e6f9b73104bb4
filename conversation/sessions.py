"""
Session registry for conversation contexts.

One ``ContextEngine`` and one ``asyncio.Lock`` per session id, so
searches within a session run one at a time while different sessions
proceed independently.
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Dict

from .context import ContextEngine

logger = logging.getLogger(__name__)

DEFAULT_SESSION = "default"


class SessionManager:
    """Creates, hands out and prunes per-session context engines."""

    def __init__(
        self,
        factory: Callable[[], ContextEngine],
        idle_seconds: float = 1800.0,
        prune_interval: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._factory = factory
        self.idle_seconds = idle_seconds
        self.prune_interval = prune_interval
        self._clock = clock
        self._last_prune = clock()
        self._contexts: Dict[str, ContextEngine] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._last_seen: Dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._contexts)

    def get(self, session_id: str = DEFAULT_SESSION) -> ContextEngine:
        if session_id not in self._contexts:
            if self._clock() - self._last_prune >= self.prune_interval:
                self.prune()
            self._contexts[session_id] = self._factory()
            self._locks[session_id] = asyncio.Lock()
            logger.debug(f"Session created: {session_id}")
        self._last_seen[session_id] = self._clock()
        return self._contexts[session_id]

    @asynccontextmanager
    async def acquire(self, session_id: str = DEFAULT_SESSION) -> AsyncIterator[ContextEngine]:
        """Hold the session lock for the duration of one search."""
        context = self.get(session_id)
        async with self._locks[session_id]:
            yield context

    def reset(self, session_id: str) -> bool:
        """Drop a session; returns False when it did not exist."""
        existed = session_id in self._contexts
        self._contexts.pop(session_id, None)
        self._locks.pop(session_id, None)
        self._last_seen.pop(session_id, None)
        return existed

    def prune(self) -> int:
        """
        Remove sessions idle longer than ``idle_seconds``.

        Runs on its own when a new session is created and ``prune_interval``
        has passed since the last sweep.
        """
        now = self._clock()
        self._last_prune = now
        stale = [
            sid for sid, seen in self._last_seen.items()
            if now - seen > self.idle_seconds and not self._locks[sid].locked()
        ]
        for sid in stale:
            self.reset(sid)
        if stale:
            logger.info(f"Pruned {len(stale)} idle sessions")
        return len(stale)
