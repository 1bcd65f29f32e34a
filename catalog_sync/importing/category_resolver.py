"""
Category Resolver

Maps raw category labels from decoded rows to category ids, creating
categories on first sight. Lookups go through the batch's ImportContext
so N rows sharing one new label create one category, not N.
"""

import logging
import re
from typing import Optional

from ..common.constants import IMAGE_EXTENSIONS, SENTINEL_CATEGORY_NAME
from ..common.errors import CategoryCreationConflict
from ..common.text_utils import clean_text
from ..models import ImportContext
from ..storage import CatalogRepository
from .slugs import SlugGenerator

logger = logging.getLogger(__name__)

_ONLY_NON_WORD = re.compile(r'^[\W_]+$')


def clean_category_label(label) -> Optional[str]:
    """
    Return a usable category name, or None for labels that must not
    become categories.

    Rejected: empty, shorter than 2 characters, starting with "http",
    containing an image file extension, or made only of non-word characters.

    Example:
        >>> clean_category_label("  Дрели ")
        'Дрели'
        >>> clean_category_label("http://x.com/a.jpg") is None
        True
    """
    if label is None:
        return None
    text = clean_text(str(label))
    if len(text) < 2:
        return None

    lowered = text.lower()
    if lowered.startswith('http'):
        return None
    if any(ext in lowered for ext in IMAGE_EXTENSIONS):
        return None
    if _ONLY_NON_WORD.match(text):
        return None
    return text


class CategoryResolver:
    """
    Resolves labels to category ids with per-batch memoization.

    Usage:
        resolver = CategoryResolver(repo, SlugGenerator())
        context = ImportContext()
        category_id = resolver.resolve("Дрели", context)
    """

    def __init__(
        self,
        repository: CatalogRepository,
        slugger: SlugGenerator,
        sentinel_name: str = SENTINEL_CATEGORY_NAME,
        case_insensitive: bool = False,
    ):
        """
        Args:
            repository: Catalog store
            slugger: Slug generator shared with the batch
            sentinel_name: Catch-all category for invalid labels
            case_insensitive: Treat "дрели" and "Дрели" as one category
        """
        self.repository = repository
        self.slugger = slugger
        self.sentinel_name = sentinel_name
        self.case_insensitive = case_insensitive

    def _cache_key(self, name: str) -> str:
        return name.casefold() if self.case_insensitive else name

    def resolve(self, raw_label, context: ImportContext, category_id: Optional[int] = None) -> int:
        """
        Category id for a raw label.

        A usable label wins. Otherwise an explicit category_id is used when it
        names an existing category, and anything else resolves to the
        sentinel category (created if absent).

        Raises:
            CategoryCreationConflict: if the forced-unique retry also collides
            PersistenceError: on other store failures
        """
        name = clean_category_label(raw_label)
        if name is None and category_id is not None:
            if self.repository.get_category(category_id) is not None:
                return category_id
            logger.debug("Category id %d does not exist, using sentinel", category_id)
        if name is None:
            if raw_label not in (None, ""):
                logger.debug("Category label %r replaced by sentinel", raw_label)
            name = self.sentinel_name

        key = self._cache_key(name)
        cached = context.category_ids.get(key)
        if cached is not None:
            return cached

        existing = self.repository.get_category_by_name(name, case_insensitive=self.case_insensitive)
        if existing is not None:
            resolved_id = existing.id
        else:
            resolved_id = self._create(name, context)

        context.category_ids[key] = resolved_id
        return resolved_id

    def _create(self, name: str, context: ImportContext) -> int:
        """Create a category, retrying once with a forced-unique slug on a slug race."""
        base = self.slugger.generate(name, kind="category")
        slug = self.slugger.resolve_unique(base, self.repository.category_slug_exists)

        try:
            category = self.repository.create_category(name=name, slug=slug)
        except CategoryCreationConflict:
            fallback = self.slugger.forced_unique(base)
            logger.warning("Category slug %r taken concurrently, retrying as %r", slug, fallback)
            category = self.repository.create_category(name=name, slug=fallback)

        context.created_categories.append(name)
        logger.info("Created category %r (slug=%s, id=%d)", name, category.slug, category.id)
        return category.id
