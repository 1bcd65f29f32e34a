"""
Data models for catalog synchronization.

This module contains pure data classes with no business logic.
"""

from .batch import BatchResult, ImportContext, MergeOutcome, MergeResult
from .category import CategorySummary, CategoryWithImage
from .product import NormalizedProduct, RejectedRow, SourceFormat, SupplierAttributes

__all__ = [
    'BatchResult',
    'CategorySummary',
    'CategoryWithImage',
    'ImportContext',
    'MergeOutcome',
    'MergeResult',
    'NormalizedProduct',
    'RejectedRow',
    'SourceFormat',
    'SupplierAttributes',
]
