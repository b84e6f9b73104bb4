"""
Pipeline tracing.

Records timed phases and point events for one search call.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass
class DiagnosticEvent:
    id: str
    timestamp: float
    duration: Optional[float] = None
    meta: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "duration": self.duration,
            "meta": self.meta,
        }


class DiagnosticTracer:
    """Collects ``DiagnosticEvent``s; times are ``perf_counter`` milliseconds."""

    def __init__(self):
        self._events: List[DiagnosticEvent] = []
        self._active: Dict[str, float] = {}

    @staticmethod
    def _now() -> float:
        return time.perf_counter() * 1000.0

    def start(self, phase: str) -> None:
        self._active[phase] = self._now()

    def stop(self, phase: str, meta: Optional[Dict[str, Any]] = None) -> None:
        started = self._active.pop(phase, None)
        if started is None:
            return
        self._events.append(
            DiagnosticEvent(id=phase, timestamp=started, duration=self._now() - started, meta=meta)
        )

    def record(self, event_id: str, meta: Optional[Dict[str, Any]] = None) -> None:
        self._events.append(DiagnosticEvent(id=event_id, timestamp=self._now(), meta=meta))

    @property
    def events(self) -> List[DiagnosticEvent]:
        return list(self._events)
