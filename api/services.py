"""
Service initialization and dependency injection for the search API.

Creates and holds the engine instance used by the routes.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from config.settings import Settings, get_settings
from assistant.engine import AssistantEngine

logger = logging.getLogger(__name__)


def load_catalog(path: str) -> List[Dict[str, Any]]:
    """Load catalog items from a JSON file (a list, or ``{"items": [...]}``)."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("items", [])
    if not isinstance(data, list):
        raise ValueError(f"Catalog file {path} must contain a list of items")
    return data


class Services:
    """Container for application services."""

    def __init__(self):
        self.settings: Optional[Settings] = None
        self.engine: Optional[AssistantEngine] = None
        self._initialized = False

    def initialize(self):
        """Build the engine from settings."""
        if self._initialized:
            return

        self.settings = get_settings()
        items: List[Dict[str, Any]] = []
        if self.settings.catalog_path:
            try:
                items = load_catalog(self.settings.catalog_path)
                logger.info(f"Loaded {len(items)} catalog items from {self.settings.catalog_path}")
            except (OSError, ValueError) as e:
                logger.error(f"Catalog load failed, starting with an empty catalog: {e}")

        self.engine = AssistantEngine(items)
        self._initialized = True

    def use_engine(self, engine: AssistantEngine):
        """Install a pre-built engine (tests, embedding applications)."""
        self.settings = self.settings or get_settings()
        self.engine = engine
        self._initialized = True

    @property
    def is_ready(self) -> bool:
        return self.engine is not None

    def health(self) -> Dict[str, Any]:
        if self.engine is None:
            return {"engine": False}
        return {
            "engine": True,
            "catalog_items": len(self.engine.items),
            "indexed": self.engine.orchestrator.index is not None,
            "sessions": len(self.engine.sessions),
        }


_services = Services()


def get_services() -> Services:
    return _services


def initialize_services():
    _services.initialize()
