"""Tests for catalog_sync/importing/category_resolver.py"""

import pytest

from catalog_sync.common.errors import CategoryCreationConflict
from catalog_sync.importing.category_resolver import CategoryResolver, clean_category_label


@pytest.fixture
def resolver(repository, slugger):
    return CategoryResolver(repository, slugger)


class TestCleanCategoryLabel:
    @pytest.mark.parametrize("label", [
        None, "", " ", "Д", "http://x.com/a.jpg", "HTTPS://shop.ru/drills",
        "photo.PNG", "drill.webp", "---", "***", "__",
    ])
    def test_rejected_labels(self, label):
        assert clean_category_label(label) is None

    def test_whitespace_normalized(self):
        assert clean_category_label("  Дрели   ударные ") == "Дрели ударные"

    def test_numeric_label_kept(self):
        assert clean_category_label("18V") == "18V"


class TestResolve:
    def test_creates_missing_category(self, resolver, repository, context):
        category_id = resolver.resolve("Дрели", context)
        category = repository.get_category_by_name("Дрели")
        assert category.id == category_id
        assert category.slug == "дрели"
        assert context.created_categories == ["Дрели"]

    def test_reuses_existing_category(self, resolver, repository, context):
        existing = repository.create_category(name="Дрели", slug="drills")
        assert resolver.resolve("Дрели", context) == existing.id
        assert context.created_categories == []

    def test_same_label_creates_once_per_batch(self, resolver, repository, context):
        ids = {resolver.resolve("Болгарки", context) for _ in range(25)}
        assert len(ids) == 1
        assert repository.count_categories() == 1

    def test_batch_cache_avoids_store_lookups(self, resolver, repository, context, monkeypatch):
        resolver.resolve("Болгарки", context)
        monkeypatch.setattr(repository, "get_category_by_name", lambda *a, **k: pytest.fail("store hit"))
        resolver.resolve("Болгарки", context)

    def test_image_url_goes_to_sentinel(self, resolver, repository, context):
        category_id = resolver.resolve("http://x.com/a.jpg", context)
        category = repository.get_category_by_name("Без категории")
        assert category.id == category_id
        assert repository.get_category_by_name("http://x.com/a.jpg") is None

    def test_all_garbage_labels_share_sentinel(self, resolver, repository, context):
        ids = {resolver.resolve(label, context) for label in ["", None, "!!", "a.jpg", "x"]}
        assert len(ids) == 1
        assert repository.count_categories() == 1

    def test_case_sensitive_by_default(self, resolver, repository, context):
        assert resolver.resolve("Дрели", context) != resolver.resolve("дрели", context)
        assert repository.count_categories() == 2

    def test_case_insensitive_option(self, repository, slugger, context):
        resolver = CategoryResolver(repository, slugger, case_insensitive=True)
        assert resolver.resolve("Дрели", context) == resolver.resolve("ДРЕЛИ", context)
        assert repository.count_categories() == 1

    def test_colliding_slug_gets_suffix(self, resolver, repository, context):
        first = repository.create_category(name="Дрели!", slug="дрели")
        resolver.resolve("Дрели", context)
        created = repository.get_category_by_name("Дрели")
        assert created.slug == "дрели-1"
        assert repository.get_category_by_slug("дрели").id == first.id


class TestSlugRace:
    def test_conflict_retried_with_forced_slug(self, resolver, repository, context, monkeypatch):
        # Another import claims the slug between the existence check and the insert
        repository.create_category(name="Пилы другого импорта", slug="пилы")
        monkeypatch.setattr(repository, "category_slug_exists", lambda slug: False)

        category_id = resolver.resolve("Пилы", context)

        category = repository.get_category_by_name("Пилы")
        assert category.id == category_id
        assert category.slug.startswith("пилы-1704067200000-")

    def test_second_conflict_propagates(self, resolver, repository, context, monkeypatch):
        def always_conflict(name, slug, **kwargs):
            raise CategoryCreationConflict(name, slug)

        monkeypatch.setattr(repository, "create_category", always_conflict)

        with pytest.raises(CategoryCreationConflict):
            resolver.resolve("Пилы", context)
        assert "Пилы" not in context.category_ids


class TestExplicitCategoryId:
    def test_existing_id_used_when_label_unusable(self, resolver, repository, context):
        saws = repository.create_category(name="Пилы", slug="пилы")
        assert resolver.resolve("", context, category_id=saws.id) == saws.id
        assert context.created_categories == []

    def test_label_wins_over_id(self, resolver, repository, context):
        saws = repository.create_category(name="Пилы", slug="пилы")
        category_id = resolver.resolve("Дрели", context, category_id=saws.id)
        assert category_id != saws.id
        assert repository.get_category(category_id).name == "Дрели"

    def test_missing_id_falls_back_to_sentinel(self, resolver, repository, context):
        category_id = resolver.resolve(None, context, category_id=42)
        assert repository.get_category(category_id).name == "Без категории"
