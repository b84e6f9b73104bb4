"""
API Routes for the conversational search engine.
"""

from . import search

__all__ = ["search"]
