"""
Upsert Merger

Inserts a normalized product or updates the existing product it
identifies (by SKU or slug). Re-importing the same supplier file updates
rows in place instead of duplicating them.
"""

import logging
from typing import Any, Dict, List, Optional

from ..models import MergeOutcome, MergeResult, NormalizedProduct
from ..storage import CatalogRepository, Product
from .slugs import SlugGenerator

logger = logging.getLogger(__name__)


class UpsertMerger:
    """
    Identity-based insert-or-update of products.

    Identity: same SKU, OR same slug. A slug-only hit counts as the same
    product when the row supplied its slug explicitly or carries the same
    display name; otherwise two different names merely cleaned to the same
    base slug, and the row is inserted under a de-collided slug.
    """

    def __init__(self, repository: CatalogRepository, slugger: SlugGenerator):
        self.repository = repository
        self.slugger = slugger

    def find_existing(self, product: NormalizedProduct) -> Optional[Product]:
        """Existing product identified by the row, or None."""
        candidates: List[Product] = self.repository.find_products_by_identity(product.sku, product.slug)

        for candidate in candidates:
            if candidate.sku == product.sku:
                return candidate

        for candidate in candidates:
            if candidate.slug == product.slug and (product.slug_explicit or candidate.name == product.name):
                return candidate

        return None

    def merge(self, product: NormalizedProduct, category_id: int) -> MergeResult:
        """
        Upsert one product.

        Raises:
            PersistenceError: insert/update failed (session already rolled back)
        """
        fields = self._mutable_fields(product, category_id)
        existing = self.find_existing(product)

        if existing is not None:
            self.repository.update_product(existing, fields)
            logger.debug("Updated product id=%d sku=%s", existing.id, existing.sku)
            return MergeResult(MergeOutcome.UPDATED, existing.id, existing.slug)

        slug = self.slugger.resolve_unique(product.slug, self.repository.product_slug_exists)
        created = self.repository.create_product({"sku": product.sku, "slug": slug, **fields})
        logger.debug("Inserted product id=%d sku=%s slug=%s", created.id, created.sku, slug)
        return MergeResult(MergeOutcome.INSERTED, created.id, slug)

    @staticmethod
    def _mutable_fields(product: NormalizedProduct, category_id: int) -> Dict[str, Any]:
        return {
            "name": product.name,
            "description": product.description or None,
            "short_description": product.short_description or None,
            "price": product.price,
            "original_price": product.original_price,
            "category_id": category_id,
            "stock": product.stock,
            "image_url": product.image_url or None,
            "is_active": product.is_active,
            "is_featured": product.is_featured,
            "tag": product.tag,
            "attributes": product.attributes.to_dict(),
        }
