"""
Slug Generator

Turns free-text names into URL-safe identifiers and de-collides them
against the store. Cyrillic letters are kept as-is (storefront URLs are
Cyrillic), everything outside [a-z0-9а-яё] is dropped.
"""

import logging
import random
import re
import string
import time
from typing import Callable, Optional

from ..common.constants import SLUG_MAX_ATTEMPTS

logger = logging.getLogger(__name__)

_DISALLOWED = re.compile(r'[^a-z0-9а-яё\s-]')
_WHITESPACE = re.compile(r'\s+')
_HYPHENS = re.compile(r'-+')

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


class SlugGenerator:
    """
    Generates candidate slugs and resolves them to unique ones.

    Usage:
        slugger = SlugGenerator()
        base = slugger.generate("Дрель ударная Makita HP1630")
        slug = slugger.resolve_unique(base, repo.product_slug_exists)
    """

    def __init__(
        self,
        max_attempts: int = SLUG_MAX_ATTEMPTS,
        clock: Callable[[], float] = time.time,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            max_attempts: Numbered suffixes to try before the synthetic fallback
            clock: Seconds-since-epoch source (injectable for tests)
            rng: Random source for fallback suffixes
        """
        self.max_attempts = max_attempts
        self.clock = clock
        self.rng = rng or random.Random()

    def _epoch_ms(self) -> int:
        return int(self.clock() * 1000)

    @staticmethod
    def clean(text: str) -> str:
        """
        Lower-case, drop disallowed characters, hyphenate whitespace.

        Example:
            >>> SlugGenerator.clean("Шуруповёрт  Bosch GSR-120!")
            'шуруповёрт-bosch-gsr-120'
        """
        if not text:
            return ""
        slug = _DISALLOWED.sub('', str(text).lower())
        slug = _WHITESPACE.sub('-', slug.strip())
        slug = _HYPHENS.sub('-', slug)
        return slug.strip('-')

    def generate(self, text: str, kind: str = "product", row_index: Optional[int] = None) -> str:
        """
        Candidate slug for text, never empty.

        Pure punctuation, URLs with nothing left after cleaning, etc. fall
        back to "category-<epoch-ms>" or "product-<epoch-ms>-<row-index>".
        """
        slug = self.clean(text)
        if slug:
            return slug

        if kind == "product":
            fallback = f"product-{self._epoch_ms()}-{row_index if row_index is not None else 0}"
        else:
            fallback = f"{kind}-{self._epoch_ms()}"
        logger.debug("Empty slug for %r, using %s", text, fallback)
        return fallback

    def forced_unique(self, base: str) -> str:
        """Synthetic slug that does not need probing: base-<epoch-ms>-<random>."""
        suffix = ''.join(self.rng.choice(_SUFFIX_ALPHABET) for _ in range(6))
        return f"{base}-{self._epoch_ms()}-{suffix}"

    def resolve_unique(self, base: str, exists: Callable[[str], bool]) -> str:
        """
        First free slug among base, base-1 ... base-<max_attempts>.

        Past the cap a forced-unique synthetic slug is returned so the search
        always terminates.

        Args:
            base: Candidate slug (from generate)
            exists: Predicate telling whether a slug is taken
        """
        if not exists(base):
            return base

        for counter in range(1, self.max_attempts + 1):
            candidate = f"{base}-{counter}"
            if not exists(candidate):
                return candidate

        fallback = self.forced_unique(base)
        logger.warning("Slug %r exhausted %d attempts, using %s", base, self.max_attempts, fallback)
        return fallback
