"""
Catalog item model.

A catalog item is a product or page the engine can return. Items are
immutable once indexed; unknown source keys are kept in ``extra``.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional

# Source keys accepted as aliases for the fixed fields
_ALIASES = {
    "price_numeric": "price",
    "badge_text": "badge",
    "recommended": "is_recommended",
}

_TEXT_FIELDS = ("title", "description", "category", "url")
_OPTIONAL_TEXT_FIELDS = ("badge", "content", "answer")
_NUMERIC_FIELDS = ("price", "sale_price", "rating")


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class CatalogItem:
    """A single searchable catalog entry."""
    title: str
    description: str = ""
    category: str = ""
    keywords: List[str] = field(default_factory=list)
    url: str = ""
    price: Optional[float] = None
    sale_price: Optional[float] = None
    badge: Optional[str] = None
    is_recommended: bool = False
    content: Optional[str] = None
    answer: Optional[str] = None
    rating: Optional[float] = None
    attributes: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def item_id(self) -> str:
        """Items are identified by title."""
        return self.title

    @property
    def effective_price(self) -> Optional[float]:
        """Sale price when set, else list price."""
        return self.sale_price or self.price

    @property
    def full_text(self) -> str:
        """Lowercased title, keywords, description and content."""
        parts = [self.title, " ".join(self.keywords), self.description, self.content or ""]
        return " ".join(parts).lower()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogItem":
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        raw_extra = data.get("extra")
        extra: Dict[str, Any] = dict(raw_extra) if isinstance(raw_extra, dict) else {}

        for key, value in data.items():
            if key == "extra":
                continue
            name = _ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
            else:
                extra[key] = value

        for name in _TEXT_FIELDS:
            value = kwargs.get(name)
            kwargs[name] = "" if value is None else str(value)
        for name in _OPTIONAL_TEXT_FIELDS:
            if kwargs.get(name) is not None:
                kwargs[name] = str(kwargs[name])
        for name in _NUMERIC_FIELDS:
            if name in kwargs:
                kwargs[name] = _to_float(kwargs[name])
        if not isinstance(kwargs.get("attributes"), dict):
            kwargs.pop("attributes", None)
        kwargs["is_recommended"] = bool(kwargs.get("is_recommended"))

        keywords = kwargs.get("keywords") or []
        if isinstance(keywords, str):
            keywords = [k.strip() for k in keywords.split(",") if k.strip()]
        elif not isinstance(keywords, (list, tuple)):
            keywords = []
        kwargs["keywords"] = [str(k) for k in keywords if k is not None]
        kwargs["extra"] = extra
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire format served by the search API."""
        data = {
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "keywords": list(self.keywords),
            "url": self.url,
            "price_numeric": self.price,
            "sale_price": self.sale_price,
            "badge_text": self.badge,
            "is_recommended": self.is_recommended,
            "content": self.content,
            "answer": self.answer,
            "rating": self.rating,
            "attributes": dict(self.attributes),
        }
        data.update(self.extra)
        return data
