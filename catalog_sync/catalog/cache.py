"""
Category Aggregate Cache

Short-TTL, process-local cache in front of the "categories with live
product count and representative image" aggregate. Entries expire by
time only: imports do not invalidate them, so counts may lag by up to
one TTL window.

Results are stored as tuples of frozen records; callers get a fresh list
each time.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ..common.constants import CATEGORY_CACHE_TTL_SECONDS
from ..models import CategorySummary, CategoryWithImage
from ..storage import CatalogRepository

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    data: Any
    expiry: float


class TTLCache:
    """
    Dict-backed cache with per-entry expiry.

    No locking: single dict operations are atomic under the interpreter,
    and a stale or duplicated recompute is acceptable here.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        """Cached value, or None when missing or expired (expired entries are dropped)."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self.clock() > entry.expiry:
            self._entries.pop(key, None)
            return None
        return entry.data

    def set(self, key: str, data: Any, ttl_seconds: float) -> None:
        self._entries[key] = CacheEntry(data=data, expiry=self.clock() + ttl_seconds)

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def invalidate(self, pattern: Optional[str] = None) -> int:
        """Drop all entries, or those whose key contains pattern. Returns count dropped."""
        if pattern is None:
            count = len(self._entries)
            self._entries.clear()
            return count

        keys = [key for key in list(self._entries) if pattern in key]
        for key in keys:
            self._entries.pop(key, None)
        return len(keys)

    def __len__(self) -> int:
        return len(self._entries)


class CategoryAggregateCache:
    """
    Cache-first access to category aggregates for storefront navigation.

    Usage:
        categories = CategoryAggregateCache(lambda: CatalogRepository(session))
        strip = categories.get_categories_with_image(supplier="vseinstrumenti")
    """

    IMAGE_NAMESPACE = "categories-with-images"
    COUNT_NAMESPACE = "categories"

    def __init__(
        self,
        repository_factory: Callable[[], CatalogRepository],
        ttl_seconds: float = CATEGORY_CACHE_TTL_SECONDS,
        cache: Optional[TTLCache] = None,
    ):
        """
        Args:
            repository_factory: Returns a repository to run the aggregate on a miss
            ttl_seconds: Entry lifetime
            cache: Backing store (one per process)
        """
        self.repository_factory = repository_factory
        self.ttl_seconds = ttl_seconds
        self.cache = cache if cache is not None else TTLCache()

    @staticmethod
    def _key(namespace: str, supplier: Optional[str]) -> str:
        return f"{namespace}:{supplier or 'all'}"

    def get_categories_with_image(self, supplier: Optional[str] = None) -> List[CategoryWithImage]:
        """Categories with product count and first image, filtered by supplier."""
        key = self._key(self.IMAGE_NAMESPACE, supplier)
        cached = self.cache.get(key)
        if cached is None:
            cached = tuple(self.repository_factory().categories_with_first_image(supplier))
            self.cache.set(key, cached, self.ttl_seconds)
            logger.debug("Cached %d categories under %s", len(cached), key)
        return list(cached)

    def get_categories(self, supplier: Optional[str] = None) -> List[CategorySummary]:
        """Categories with live product counts (non-empty only when filtered)."""
        key = self._key(self.COUNT_NAMESPACE, supplier)
        cached = self.cache.get(key)
        if cached is None:
            cached = tuple(self.repository_factory().categories_with_counts(supplier))
            self.cache.set(key, cached, self.ttl_seconds)
        return list(cached)

    def invalidate(self, supplier: Optional[str] = None) -> int:
        """Manual invalidation for admin tooling: everything, or one supplier's views."""
        if supplier is None:
            return self.cache.invalidate()
        removed = 0
        for namespace in (self.IMAGE_NAMESPACE, self.COUNT_NAMESPACE):
            removed += self.cache.delete(self._key(namespace, supplier))
        return removed
