"""Import pipeline: slugs, category resolution, row normalization, upsert, batch orchestration."""

from .batch_importer import BatchImporter, import_batch
from .category_resolver import CategoryResolver, clean_category_label
from .row_normalizer import ColumnMap, RowNormalizer
from .slugs import SlugGenerator
from .upsert import UpsertMerger

__all__ = [
    'BatchImporter',
    'CategoryResolver',
    'ColumnMap',
    'RowNormalizer',
    'SlugGenerator',
    'UpsertMerger',
    'clean_category_label',
    'import_batch',
]
