"""
Row Normalizer

Coerces loosely-typed decoded rows (CSV/XLSX/JSON/scraped) into strict
NormalizedProduct records. Rows missing identity fields become
RejectedRow results instead of raising.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Union

from ..common.constants import DEFAULT_COLUMN_SYNONYMS
from ..common.text_utils import parse_flag, parse_int, parse_price, stringify_cell
from ..models import ImportContext, NormalizedProduct, RejectedRow, SourceFormat, SupplierAttributes
from .slugs import SlugGenerator

logger = logging.getLogger(__name__)


class ColumnMap:
    """
    Binding of product fields to source headers.

    Detection is heuristic: for each field (in synonym-table order) a
    header whose lower-cased name equals one of the field's synonyms is
    bound; failing that, the first header in sheet order that contains
    one. A header bound to one field is not offered to later fields.
    """

    def __init__(self, bindings: Dict[str, Any]):
        self.bindings = bindings

    @classmethod
    def detect(cls, headers: Iterable[Any], synonyms: Dict[str, List[str]]) -> "ColumnMap":
        lowered = {h: str(h).strip().lower() for h in headers if h is not None}
        lowered = {h: text for h, text in lowered.items() if text}
        bindings: Dict[str, Any] = {}

        for field_name, field_synonyms in synonyms.items():
            free = [h for h in lowered if h not in bindings.values()]
            exact = [h for h in free if lowered[h] in field_synonyms]
            partial = [h for h in free if any(s in lowered[h] for s in field_synonyms)]
            matches = exact or partial
            if matches:
                bindings[field_name] = matches[0]

        return cls(bindings)

    def header_for(self, field_name: str) -> Optional[Any]:
        return self.bindings.get(field_name)

    def value(self, row: Mapping, field_name: str) -> Any:
        header = self.bindings.get(field_name)
        if header is None:
            return None
        return row.get(header)

    def __contains__(self, field_name: str) -> bool:
        return field_name in self.bindings

    def __repr__(self) -> str:
        return f"ColumnMap({self.bindings!r})"


class RowNormalizer:
    """
    Turns decoded rows into NormalizedProduct or RejectedRow.

    Usage:
        normalizer = RowNormalizer(SlugGenerator())
        result = normalizer.normalize({"Наименование": "Дрель", ...}, SourceFormat.XLSX)
    """

    def __init__(self, slugger: SlugGenerator, synonyms: Optional[Dict[str, List[str]]] = None):
        self.slugger = slugger
        self.synonyms = synonyms or DEFAULT_COLUMN_SYNONYMS

    def column_map(self, row: Mapping, context: Optional[ImportContext] = None) -> ColumnMap:
        """Column map for a row's key set, memoized per batch."""
        keys = tuple(row.keys())
        if context is not None and keys in context.column_maps:
            return context.column_maps[keys]

        column_map = ColumnMap.detect(keys, self.synonyms)
        logger.debug("Detected columns: %s", column_map.bindings)
        if context is not None:
            context.column_maps[keys] = column_map
        return column_map

    def normalize(
        self,
        raw_row: Any,
        source_format: SourceFormat,
        context: Optional[ImportContext] = None,
        row_index: int = 0,
    ) -> Union[NormalizedProduct, RejectedRow]:
        """
        Normalize one decoded row.

        Args:
            raw_row: Key/value mapping from a decoder or scraper
            source_format: Origin of the row
            context: Batch context (memoizes column detection)
            row_index: 0-based position in the batch

        Returns:
            NormalizedProduct, or RejectedRow when name/SKU is missing or the
            row is not a mapping
        """
        if not isinstance(raw_row, Mapping):
            return RejectedRow(row_index, f"row is not a key/value mapping ({type(raw_row).__name__})")

        columns = self.column_map(raw_row, context)

        name = stringify_cell(columns.value(raw_row, "name"))
        sku = stringify_cell(columns.value(raw_row, "sku"))
        if not name:
            return RejectedRow(row_index, "missing name", identifier=sku)
        if not sku:
            return RejectedRow(row_index, "missing SKU", identifier=name)

        explicit_slug = self.slugger.clean(stringify_cell(columns.value(raw_row, "slug")))
        slug = explicit_slug or self.slugger.generate(name, kind="product", row_index=row_index)

        original_price = parse_price(columns.value(raw_row, "original_price"))
        image_url = stringify_cell(columns.value(raw_row, "image_url"))
        category_id = parse_int(columns.value(raw_row, "category_id"))

        try:
            return NormalizedProduct(
                sku=sku,
                name=name,
                slug=slug,
                category_label=stringify_cell(columns.value(raw_row, "category")),
                category_id=category_id if category_id > 0 else None,
                price=parse_price(columns.value(raw_row, "price")),
                original_price=None if original_price == "0.00" else original_price,
                stock=max(0, parse_int(columns.value(raw_row, "stock"))),
                description=stringify_cell(columns.value(raw_row, "description")),
                short_description=stringify_cell(columns.value(raw_row, "short_description")),
                image_url=image_url,
                is_active=parse_flag(columns.value(raw_row, "is_active"), default=True),
                is_featured=parse_flag(columns.value(raw_row, "is_featured"), default=False),
                attributes=self._attributes(raw_row, columns),
                slug_explicit=bool(explicit_slug),
                row_index=row_index,
                source_format=source_format,
            )
        except ValueError as e:
            return RejectedRow(row_index, str(e), identifier=sku)

    def _attributes(self, row: Mapping, columns: ColumnMap) -> SupplierAttributes:
        """Supplier attributes from a packed tag and/or dedicated columns (columns win)."""
        tag = stringify_cell(columns.value(row, "tag"))
        if '|' in tag or ':' in tag:
            attrs = SupplierAttributes.from_tag(tag)
        else:
            attrs = SupplierAttributes(supplier=tag)

        for key in SupplierAttributes.KNOWN_KEYS:
            value = stringify_cell(columns.value(row, key))
            if value:
                setattr(attrs, key, value)
        return attrs
