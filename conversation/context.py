"""
Conversation context tracking.

Remembers what the user was last talking about so that short follow-ups
("harganya berapa?") can be resolved against the previous subject.
"""

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Sequence, Set

from config import defaults
from models.results import SearchResult

logger = logging.getLogger(__name__)


@dataclass
class ConversationState:
    """Per-session memory of the most recent completed search."""
    last_category: Optional[str] = None
    last_item_id: Optional[str] = None
    locked_entity_id: Optional[str] = None
    detected_entities: Set[str] = field(default_factory=set)
    interaction_count: int = 0
    last_active: float = 0.0

    @property
    def subject(self) -> Optional[str]:
        """Locked item if any, else the last item."""
        return self.locked_entity_id or self.last_item_id

    def copy(self) -> "ConversationState":
        return replace(self, detected_entities=set(self.detected_entities))


class ContextEngine:
    """
    Owns one conversation's state.

    - Resolves anaphora by appending the current subject to short
      queries containing a reference trigger
    - Locks the top item after a high-confidence answer and releases it
      after a low-confidence one
    - Resets after ``max_interactions`` updates or when idle past the TTL
    """

    def __init__(
        self,
        reference_triggers: Optional[Sequence[str]] = None,
        ttl_seconds: float = 300.0,
        max_interactions: int = 20,
        lock_confidence: int = 80,
        unlock_confidence: int = 30,
        anaphora_max_length: int = 25,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.reference_triggers = [
            t.lower() for t in (
                reference_triggers if reference_triggers is not None else defaults.REFERENCE_TRIGGERS
            )
        ]
        self.ttl_seconds = ttl_seconds
        self.max_interactions = max_interactions
        self.lock_confidence = lock_confidence
        self.unlock_confidence = unlock_confidence
        self.anaphora_max_length = anaphora_max_length
        self._clock = clock
        self._state = ConversationState(last_active=clock())

    def _check_staleness(self) -> None:
        idle = self._clock() - self._state.last_active
        if idle > self.ttl_seconds:
            logger.debug(f"Context idle for {idle:.0f}s, resetting")
            self.reset()

    def reset(self) -> None:
        self._state = ConversationState(last_active=self._clock())

    def get_state(self) -> ConversationState:
        self._check_staleness()
        return self._state.copy()

    def resolve_anaphora(self, query: str) -> str:
        """
        Append the current subject to a short referring query.

        Args:
            query: User query after security checks

        Returns:
            ``"<query> <subject>"`` when resolved, else the query unchanged
        """
        self._check_staleness()
        if not query or len(query) >= self.anaphora_max_length:
            return query

        subject = self._state.subject
        if not subject:
            return query

        lowered = query.lower()
        if any(t in lowered for t in self.reference_triggers):
            resolved = f"{query} {subject}"
            logger.debug(f"Anaphora resolved: '{query}' → '{resolved}'")
            return resolved
        return query

    def update(self, result: SearchResult) -> None:
        """Record the outcome of one completed sub-search."""
        self._check_staleness()
        state = self._state
        state.interaction_count += 1
        state.last_active = self._clock()

        if state.interaction_count > self.max_interactions:
            logger.debug("Interaction limit reached, resetting context")
            self.reset()
            return

        top = result.top
        if top is not None:
            state.last_category = top.category or None
            state.last_item_id = top.item_id
            if result.confidence > self.lock_confidence:
                state.locked_entity_id = top.item_id
            elif result.confidence < self.unlock_confidence:
                state.locked_entity_id = None

        for name, present in result.entities.items():
            if present:
                state.detected_entities.add(name)
