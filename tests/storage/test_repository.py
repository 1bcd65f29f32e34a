"""Tests for catalog_sync/storage/repository.py"""

import pytest

from catalog_sync.common.errors import CategoryCreationConflict, PersistenceError
from catalog_sync.storage import CatalogRepository, Category, make_session_factory, session_scope


def _add_product(repository, category, sku, image="", active=True, tag=None):
    return repository.create_product({
        "sku": sku,
        "name": f"Товар {sku}",
        "slug": sku.lower(),
        "price": "100.00",
        "category_id": category.id,
        "image_url": image or None,
        "is_active": active,
        "tag": tag,
        "attributes": {},
    })


@pytest.fixture
def drills(repository):
    return repository.create_category(name="Дрели", slug="дрели")


@pytest.fixture
def saws(repository):
    return repository.create_category(name="Пилы", slug="пилы")


class TestCategories:
    def test_create_and_lookup(self, repository, drills):
        assert repository.get_category_by_name("Дрели").id == drills.id
        assert repository.get_category_by_slug("дрели").id == drills.id
        assert repository.category_slug_exists("дрели")
        assert not repository.category_slug_exists("пилы")
        assert drills.icon == "tool"

    def test_name_lookup_is_case_sensitive_by_default(self, repository, drills):
        assert repository.get_category_by_name("дрели") is None
        assert repository.get_category_by_name("ДРЕЛИ", case_insensitive=True).id == drills.id

    def test_duplicate_slug_raises_conflict(self, repository, drills):
        with pytest.raises(CategoryCreationConflict) as exc_info:
            repository.create_category(name="Дрели 2", slug="дрели")
        assert exc_info.value.slug == "дрели"
        assert repository.count_categories() == 1


class TestProducts:
    def test_find_by_identity(self, repository, drills):
        a = _add_product(repository, drills, "A-1")
        b = _add_product(repository, drills, "B-1")

        found = repository.find_products_by_identity("A-1", "b-1")
        assert [p.id for p in found] == [a.id, b.id]
        assert repository.find_products_by_identity("Z", "z") == []

    def test_delete_by_tag(self, repository, drills):
        _add_product(repository, drills, "A-1", tag="vseinstrumenti")
        _add_product(repository, drills, "A-2", tag="vseinstrumenti")
        _add_product(repository, drills, "B-1", tag="220volt")

        assert repository.delete_products_by_tag("vseinstrumenti") == 2
        assert repository.count_products() == 1


class TestAggregates:
    def test_categories_with_first_image(self, repository, drills, saws):
        _add_product(repository, drills, "D-2", image="https://cdn/b.jpg")
        _add_product(repository, drills, "D-1", image="https://cdn/a.jpg")
        _add_product(repository, drills, "D-3")
        _add_product(repository, drills, "D-4", image="https://cdn/0.jpg", active=False)
        _add_product(repository, saws, "S-1")

        result = repository.categories_with_first_image()

        assert len(result) == 1
        assert result[0].name == "Дрели"
        assert result[0].product_count == 2
        assert result[0].image_url == "https://cdn/a.jpg"

    def test_supplier_filter_is_case_insensitive_contains(self, repository, drills, saws):
        _add_product(repository, drills, "D-1", image="https://cdn/d.jpg", tag="vseinstrumenti")
        _add_product(repository, saws, "S-1", image="https://cdn/s.jpg", tag="220volt")

        result = repository.categories_with_first_image("VSEINSTRUMENTI")
        assert [c.name for c in result] == ["Дрели"]

        assert [c.name for c in repository.categories_with_first_image("volt")] == ["Пилы"]
        assert repository.categories_with_first_image("nobody") == []

    def test_supplier_filter_escapes_wildcards(self, repository, drills):
        _add_product(repository, drills, "D-1", image="https://cdn/d.jpg", tag="vseinstrumenti")
        assert repository.categories_with_first_image("%") == []

    def test_ordered_by_name(self, repository, saws, drills):
        _add_product(repository, saws, "S-1", image="https://cdn/s.jpg")
        _add_product(repository, drills, "D-1", image="https://cdn/d.jpg")

        assert [c.name for c in repository.categories_with_first_image()] == ["Дрели", "Пилы"]

    def test_categories_with_counts(self, repository, drills, saws):
        _add_product(repository, drills, "D-1", tag="vseinstrumenti")
        _add_product(repository, drills, "D-2", active=False, tag="vseinstrumenti")

        counts = {c.name: c.product_count for c in repository.categories_with_counts()}
        assert counts == {"Дрели": 1, "Пилы": 0}

        filtered = repository.categories_with_counts("vseinstrumenti")
        assert [(c.name, c.product_count) for c in filtered] == [("Дрели", 1)]


class TestSessionScope:
    def test_commits_on_success(self, engine):
        factory = make_session_factory(engine)
        with session_scope(factory) as session:
            CatalogRepository(session).create_category(name="Пилы", slug="пилы")

        with session_scope(factory) as session:
            assert CatalogRepository(session).count_categories() == 1

    def test_rolls_back_on_error(self, engine):
        factory = make_session_factory(engine)
        with pytest.raises(RuntimeError):
            with session_scope(factory) as session:
                session.add(Category(name="Пилы", slug="пилы"))
                session.flush()
                raise RuntimeError("boom")

        with session_scope(factory) as session:
            assert CatalogRepository(session).count_categories() == 0


class TestCommitFailures:
    def test_driver_error_becomes_persistence_error(self, repository, drills):
        with pytest.raises(PersistenceError):
            _add_product_with_stock(repository, drills, "A-1", 10 ** 20)

        # Session is usable again after the rollback
        assert repository.count_products() == 0
        _add_product_with_stock(repository, drills, "A-2", 5)
        assert repository.count_products() == 1


def _add_product_with_stock(repository, category, sku, stock):
    return repository.create_product({
        "sku": sku, "name": f"Товар {sku}", "slug": sku.lower(),
        "category_id": category.id, "stock": stock, "attributes": {},
    })
