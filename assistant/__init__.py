"""
Assistant Module for the conversational search engine.

This module provides the search pipeline and its public facade:
- Query orchestration (compound splitting, sub-searches, merging)
- Input security and middleware hooks
- Answer composition and product comparison
- Diagnostics tracing
"""

from .comparison import ProductComparator
from .diagnostics import DiagnosticEvent, DiagnosticTracer
from .engine import AssistantEngine
from .guard import SecurityCheckResult, SecurityGuard
from .middleware import MiddlewareContext, MiddlewareManager
from .orchestrator import QueryOrchestrator
from .response import ResponseComposer, format_currency
from .splitter import CompoundSplitter

__all__ = [
    "AssistantEngine",
    "CompoundSplitter",
    "DiagnosticEvent",
    "DiagnosticTracer",
    "MiddlewareContext",
    "MiddlewareManager",
    "ProductComparator",
    "QueryOrchestrator",
    "ResponseComposer",
    "SecurityCheckResult",
    "SecurityGuard",
    "format_currency",
]
