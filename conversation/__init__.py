"""
Conversation Module for the conversational search engine.
"""

from .context import ContextEngine, ConversationState
from .sessions import DEFAULT_SESSION, SessionManager

__all__ = ["ContextEngine", "ConversationState", "DEFAULT_SESSION", "SessionManager"]
