"""
Batch Importer

Runs every decoded row of one import through
normalize -> resolve category -> merge, strictly in order, counting
successes and failures. A bad row is recorded and skipped; it never
aborts the batch.

Row lifecycle:
    Decoded -> Normalized -> CategoryResolved -> Merged -> Counted
    Decoded -> Rejected            (normalization failure)
    Merged  -> Rejected            (persistence failure)
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterable, List, Optional

from ..common.constants import MAX_BATCH_ERRORS, SENTINEL_CATEGORY_NAME
from ..common.errors import EmptyImportError
from ..models import BatchResult, ImportContext, RejectedRow, SourceFormat
from ..storage import CatalogRepository
from .category_resolver import CategoryResolver
from .row_normalizer import RowNormalizer
from .slugs import SlugGenerator
from .upsert import UpsertMerger

logger = logging.getLogger(__name__)


class BatchImporter:
    """
    Orchestrates one import over a whole set of decoded rows.

    Usage:
        importer = BatchImporter(CatalogRepository(session))
        result = importer.import_batch(rows, SourceFormat.XLSX)
        print(result.summary())
    """

    def __init__(
        self,
        repository: CatalogRepository,
        slugger: Optional[SlugGenerator] = None,
        synonyms: Optional[Dict[str, List[str]]] = None,
        sentinel_name: str = SENTINEL_CATEGORY_NAME,
        case_insensitive_categories: bool = False,
        max_errors: int = MAX_BATCH_ERRORS,
    ):
        """
        Args:
            repository: Catalog store for this request
            slugger: Slug generator (shared by resolver, normalizer and merger)
            synonyms: Header synonym table for column detection
            sentinel_name: Category for rows with missing/garbage labels
            case_insensitive_categories: Match category names ignoring case
            max_errors: Per-row error messages kept in the result
        """
        self.repository = repository
        self.slugger = slugger or SlugGenerator()
        self.normalizer = RowNormalizer(self.slugger, synonyms)
        self.resolver = CategoryResolver(
            repository,
            self.slugger,
            sentinel_name=sentinel_name,
            case_insensitive=case_insensitive_categories,
        )
        self.merger = UpsertMerger(repository, self.slugger)
        self.max_errors = max_errors

    @classmethod
    def from_settings(cls, repository: CatalogRepository, settings: Dict[str, Any]) -> "BatchImporter":
        """Build from load_import_settings() output."""
        return cls(
            repository,
            slugger=SlugGenerator(max_attempts=settings['slug_max_attempts']),
            synonyms=settings['column_synonyms'],
            sentinel_name=settings['sentinel_category'],
            max_errors=settings['max_errors'],
        )

    def import_batch(self, rows: Optional[Iterable[Any]], source_format: SourceFormat) -> BatchResult:
        """
        Import all rows, continuing past individual row errors.

        Args:
            rows: Decoded rows (key/value mappings) in source order
            source_format: Where the rows came from

        Returns:
            BatchResult with success/failed counts and a capped error sample

        Raises:
            EmptyImportError: no rows at all (nothing is processed)
        """
        if rows is None:
            raise EmptyImportError("No rows supplied")
        rows = list(rows)
        if not rows:
            raise EmptyImportError("File contains no product rows")

        context = ImportContext()
        result = BatchResult(max_errors=self.max_errors)
        started = time.monotonic()
        logger.info("Importing %d %s rows", len(rows), source_format.value)

        for row_index, raw_row in enumerate(rows):
            self._import_row(raw_row, row_index, source_format, context, result)

        result.categories_created = list(context.created_categories)
        logger.info(
            "%s in %.1fs (categories created: %d)",
            result.summary(), time.monotonic() - started, len(result.categories_created),
        )
        return result

    def _import_row(
        self,
        raw_row: Any,
        row_index: int,
        source_format: SourceFormat,
        context: ImportContext,
        result: BatchResult,
    ) -> None:
        identifier = ""
        try:
            normalized = self.normalizer.normalize(raw_row, source_format, context, row_index)

            if isinstance(normalized, RejectedRow):
                message = self._format_error(row_index, normalized.identifier, normalized.reason)
                logger.warning("Rejected %s", message)
                result.record_failure(message, rejected=True)
                return

            identifier = normalized.sku
            category_id = self.resolver.resolve(
                normalized.category_label, context, category_id=normalized.category_id
            )
            merged = self.merger.merge(normalized, category_id)
        except Exception as e:
            self.repository.rollback()
            message = self._format_error(row_index, identifier, f"{type(e).__name__}: {str(e)[:200]}")
            logger.warning("Failed %s", message)
            result.record_failure(message)
            return

        result.record_merge(merged.outcome)
        logger.debug("Row %d %s (product id=%d)", row_index + 1, merged.outcome.value, merged.product_id)

    @staticmethod
    def _format_error(row_index: int, identifier: str, message: str) -> str:
        if identifier:
            return f"Row {row_index + 1} ({identifier}): {message}"
        return f"Row {row_index + 1}: {message}"


def import_batch(
    repository: CatalogRepository,
    rows: Optional[Iterable[Any]],
    source_format: SourceFormat,
    **options: Any,
) -> BatchResult:
    """Import rows with a one-off BatchImporter; options go to its constructor."""
    return BatchImporter(repository, **options).import_batch(rows, source_format)
