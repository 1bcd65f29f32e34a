"""Tests for catalog_sync/models"""

import pytest

from catalog_sync.models import BatchResult, MergeOutcome, NormalizedProduct, SupplierAttributes


class TestSupplierAttributesFromTag:
    def test_full_legacy_tag(self):
        attrs = SupplierAttributes.from_tag("220volt|brand:Makita|model:HP1630|warranty:12 мес|availability:В наличии")
        assert attrs.supplier == "220volt"
        assert attrs.brand == "Makita"
        assert attrs.model == "HP1630"
        assert attrs.warranty == "12 мес"
        assert attrs.availability == "В наличии"

    def test_unknown_keys_go_to_extra(self):
        attrs = SupplierAttributes.from_tag("vi|brand:Bosch|voltage:18V")
        assert attrs.extra == {"voltage": "18V"}

    def test_malformed_segments_ignored(self):
        attrs = SupplierAttributes.from_tag("vi|garbage|brand:|:x|model:GSR")
        assert attrs.brand == ""
        assert attrs.model == "GSR"
        assert attrs.extra == {}

    def test_no_supplier_segment(self):
        attrs = SupplierAttributes.from_tag("brand:Makita")
        assert attrs.supplier == ""
        assert attrs.brand == "Makita"

    def test_empty_tag(self):
        assert SupplierAttributes.from_tag("").is_empty()

    def test_to_tag_renders_legacy_form(self):
        attrs = SupplierAttributes(supplier="vi", brand="Bosch", availability="Под заказ")
        assert attrs.to_tag() == "vi|brand:Bosch|availability:Под заказ"

    def test_to_dict_excludes_supplier_and_empty(self):
        attrs = SupplierAttributes(supplier="vi", brand="Bosch")
        assert attrs.to_dict() == {"brand": "Bosch"}


class TestNormalizedProduct:
    def test_requires_sku(self):
        with pytest.raises(ValueError, match="SKU"):
            NormalizedProduct(sku="", name="Дрель", slug="дрель", category_label="Дрели")

    def test_requires_name(self):
        with pytest.raises(ValueError, match="name"):
            NormalizedProduct(sku="A1", name="", slug="a1", category_label="Дрели")

    def test_tag_is_supplier(self):
        product = NormalizedProduct(
            sku="A1", name="Дрель", slug="дрель", category_label="Дрели",
            attributes=SupplierAttributes(supplier="vi"),
        )
        assert product.tag == "vi"

    def test_tag_none_without_supplier(self):
        product = NormalizedProduct(sku="A1", name="Дрель", slug="дрель", category_label="")
        assert product.tag is None


class TestBatchResult:
    def test_error_list_is_capped(self):
        result = BatchResult(max_errors=2)
        for i in range(5):
            result.record_failure(f"Row {i}: bad")
        assert result.failed == 5
        assert result.errors == ["Row 0: bad", "Row 1: bad"]
        assert result.errors_truncated == 3

    def test_merge_counts(self):
        result = BatchResult()
        result.record_merge(MergeOutcome.INSERTED)
        result.record_merge(MergeOutcome.UPDATED)
        assert (result.success, result.inserted, result.updated) == (2, 1, 1)

    def test_to_dict_shape(self):
        result = BatchResult()
        result.record_merge(MergeOutcome.INSERTED)
        result.record_failure("Row 2: missing SKU", rejected=True)
        assert result.to_dict() == {"success": 1, "failed": 1, "errors": ["Row 2: missing SKU"]}

    def test_summary(self):
        result = BatchResult()
        result.record_merge(MergeOutcome.INSERTED)
        result.record_failure("x")
        assert result.summary() == "Imported 1 of 2 rows (1 new, 0 updated), 1 failed"
