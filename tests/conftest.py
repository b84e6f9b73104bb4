"""Shared fixtures for search engine tests."""

import os
import pytest
from fastapi.testclient import TestClient

# Keep tests independent of a developer's .env
os.environ.setdefault("ASSISTANT_LANGUAGE", "id")
os.environ.setdefault("ASSISTANT_REMOTE_URLS", "[]")

from assistant.engine import AssistantEngine
from linguistics.providers import EnglishProvider
from models.catalog import CatalogItem


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def catalog_rows():
    """Catalog items in wire format, as loaded from a JSON file."""
    return [
        {
            "title": "iPhone 15 Pro",
            "description": "Apple flagship",
            "category": "Produk",
            "keywords": ["iphone", "apple"],
            "url": "https://toko.example/iphone-15-pro",
            "price_numeric": 20_000_000,
            "is_recommended": True,
            "content": "Fitur: kamera 48MP, chip A17 Pro. Garansi 1 tahun.",
            "rating": 4.8,
        },
        {
            "title": "Samsung Galaxy S24",
            "description": "Android layar lebar",
            "category": "Produk",
            "keywords": ["samsung", "galaxy", "android"],
            "url": "https://toko.example/galaxy-s24",
            "price_numeric": 15_000_000,
            "sale_price": 13_500_000,
            "content": "Fitur: kamera 200MP, layar 6.8 inci.",
            "rating": 4.6,
        },
        {
            "title": "Kebijakan Pengiriman",
            "description": "Pengiriman ke seluruh Indonesia dalam 2 sampai 5 hari kerja",
            "category": "Page",
            "keywords": ["pengiriman", "ongkir"],
            "url": "https://toko.example/pengiriman",
        },
    ]


@pytest.fixture
def catalog(catalog_rows):
    return [CatalogItem.from_dict(row) for row in catalog_rows]


@pytest.fixture
def iphone(catalog):
    return catalog[0]


@pytest.fixture
def samsung(catalog):
    return catalog[1]


@pytest.fixture
def shipping_page(catalog):
    return catalog[2]


@pytest.fixture
def provider():
    """Dictionary-free provider so results do not depend on stemmer data."""
    return EnglishProvider()


@pytest.fixture
def engine(catalog_rows, provider):
    return AssistantEngine(catalog_rows, provider=provider)


@pytest.fixture
def client(engine):
    """FastAPI test client serving the fixture engine."""
    from api.main import app
    from api.services import get_services

    get_services().use_engine(engine)
    return TestClient(app)
