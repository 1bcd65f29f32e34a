"""
Read-side category models for storefront navigation.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CategorySummary:
    """Category with its live active-product count."""
    id: int
    name: str
    slug: str
    description: Optional[str]
    icon: Optional[str]
    product_count: int


@dataclass(frozen=True)
class CategoryWithImage(CategorySummary):
    """Category strip entry: summary plus a representative product image."""
    image_url: Optional[str] = None
