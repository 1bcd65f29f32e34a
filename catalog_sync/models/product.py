"""
Product data models.

Strict internal product records produced by the row normalizer, and the
structured supplier attributes that replace the packed tag string.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class SourceFormat(str, Enum):
    """Where a decoded row came from."""
    CSV = "csv"
    XLSX = "xlsx"
    JSON = "json"
    SCRAPED = "scraped"


@dataclass
class SupplierAttributes:
    """
    Supplier metadata carried by a product.

    Legacy scrapers pack this into one tag string:
        "supplierId|brand:X|model:Y|warranty:Z|availability:W"
    """

    KNOWN_KEYS = ("brand", "model", "warranty", "availability")

    supplier: str = ""
    brand: str = ""
    model: str = ""
    warranty: str = ""
    availability: str = ""
    extra: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_tag(cls, tag: str) -> "SupplierAttributes":
        """Parse the legacy packed tag. Segments without ':' after the first are ignored."""
        attrs = cls()
        if not tag:
            return attrs

        segments = [s.strip() for s in tag.split('|')]
        if segments and ':' not in segments[0]:
            attrs.supplier = segments.pop(0)

        for segment in segments:
            key, sep, value = segment.partition(':')
            key = key.strip().lower()
            value = value.strip()
            if not sep or not key or not value:
                continue
            if key in cls.KNOWN_KEYS:
                setattr(attrs, key, value)
            else:
                attrs.extra[key] = value
        return attrs

    def to_tag(self) -> str:
        """Render back to the legacy packed form."""
        parts = [self.supplier]
        for key in self.KNOWN_KEYS:
            value = getattr(self, key)
            if value:
                parts.append(f"{key}:{value}")
        parts.extend(f"{k}:{v}" for k, v in self.extra.items())
        return '|'.join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Non-empty attributes as a JSON-ready dict (supplier excluded)."""
        data = {key: getattr(self, key) for key in self.KNOWN_KEYS if getattr(self, key)}
        data.update(self.extra)
        return data

    def is_empty(self) -> bool:
        return not self.supplier and not self.to_dict()


@dataclass
class NormalizedProduct:
    """
    A decoded row coerced into a strict product record.

    Category is still a raw label here; the batch importer resolves it
    to a category id before merging.
    """

    # Identity (required)
    sku: str
    name: str
    slug: str
    category_label: str

    # Explicit category reference; used when the label is missing or unusable
    category_id: Optional[int] = None

    # Pricing: decimal strings, never floats
    price: str = "0.00"
    original_price: Optional[str] = None

    stock: int = 0
    description: str = ""
    short_description: str = ""
    image_url: str = ""
    is_active: bool = True
    is_featured: bool = False

    attributes: SupplierAttributes = field(default_factory=SupplierAttributes)

    # True when the slug came from a slug column rather than the name
    slug_explicit: bool = False

    # Provenance
    row_index: int = 0
    source_format: SourceFormat = SourceFormat.JSON

    def __post_init__(self):
        """Validate identity fields after initialization."""
        if not self.name:
            raise ValueError("Product name is required")
        if not self.sku:
            raise ValueError("Product SKU is required")
        if not self.slug:
            raise ValueError("Product slug is required")

    @property
    def tag(self) -> Optional[str]:
        """Value stored in the product tag column (supplier id)."""
        return self.attributes.supplier or None


@dataclass
class RejectedRow:
    """A row that failed normalization and never reaches the merger."""
    row_index: int
    reason: str
    identifier: str = ""
