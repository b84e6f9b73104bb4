"""
API Module for the conversational search engine.

FastAPI application with routes for:
- Conversational search (also the remote retrieval contract)
- Product comparison
- Catalog updates and session resets
"""

from .main import create_app, app

__all__ = ["create_app", "app"]
