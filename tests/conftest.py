"""Shared test fixtures."""

import pytest

from catalog_sync.importing import SlugGenerator
from catalog_sync.models import ImportContext
from catalog_sync.storage import (
    CatalogRepository,
    create_engine_from_url,
    init_db,
    make_session_factory,
)


@pytest.fixture
def engine():
    """In-memory SQLite engine with catalog tables."""
    engine = create_engine_from_url("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    factory = make_session_factory(engine)
    with factory() as session:
        yield session


@pytest.fixture
def repository(session):
    return CatalogRepository(session)


@pytest.fixture
def fixed_clock():
    """Clock frozen at 2024-01-01 00:00:00 UTC (epoch ms 1704067200000)."""
    return lambda: 1704067200.0


@pytest.fixture
def slugger(fixed_clock):
    return SlugGenerator(clock=fixed_clock)


@pytest.fixture
def context():
    return ImportContext()


@pytest.fixture
def sheet_rows():
    """Rows as decoded from a Russian supplier price sheet."""
    return [
        {
            "Артикул": "MK-HP1630",
            "Наименование": "Дрель ударная Makita HP1630",
            "Категория": "Дрели",
            "Цена, руб": "5 990,00 ₽",
            "Остаток": "12 шт",
            "Изображение": "https://cdn.example.ru/hp1630.jpg",
        },
        {
            "Артикул": "BS-GSR120",
            "Наименование": "Шуруповёрт Bosch GSR 120-LI",
            "Категория": "Шуруповёрты",
            "Цена, руб": "7 450",
            "Остаток": "3",
            "Изображение": "https://cdn.example.ru/gsr120.jpg",
        },
        {
            "Артикул": "MK-HR2470",
            "Наименование": "Перфоратор Makita HR2470",
            "Категория": "Дрели",
            "Цена, руб": "9 100,50",
            "Остаток": "0",
            "Изображение": "",
        },
    ]


def make_json_rows(count, category="Дрели", prefix="SKU"):
    """Canonical JSON rows (as sent by the admin bulk import form)."""
    return [
        {
            "sku": f"{prefix}-{i:03d}",
            "name": f"Товар {prefix} {i}",
            "price": f"{1000 + i}",
            "category": category,
            "imageUrl": f"https://cdn.example.ru/{prefix.lower()}-{i}.jpg",
        }
        for i in range(1, count + 1)
    ]


@pytest.fixture
def json_rows():
    """Factory for canonical JSON rows."""
    return make_json_rows
