"""
Batch-level data models: per-batch context, merge outcomes and results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class MergeOutcome(str, Enum):
    INSERTED = "inserted"
    UPDATED = "updated"


@dataclass
class MergeResult:
    outcome: MergeOutcome
    product_id: int
    slug: str


@dataclass
class ImportContext:
    """
    State shared by the rows of one import_batch call.

    Created per call and discarded with it, so concurrent batches never
    see each other's in-memory category lookups.
    """
    category_ids: Dict[str, int] = field(default_factory=dict)
    created_categories: List[str] = field(default_factory=list)
    column_maps: Dict[tuple, Any] = field(default_factory=dict)


@dataclass
class BatchResult:
    """Success/failure accounting for one import call (not persisted)."""

    max_errors: int = 10
    success: int = 0
    failed: int = 0
    inserted: int = 0
    updated: int = 0
    rejected: int = 0
    errors: List[str] = field(default_factory=list)
    errors_truncated: int = 0
    categories_created: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success + self.failed

    def record_merge(self, outcome: MergeOutcome) -> None:
        self.success += 1
        if outcome is MergeOutcome.INSERTED:
            self.inserted += 1
        else:
            self.updated += 1

    def record_failure(self, message: str, rejected: bool = False) -> None:
        """Count a failed row, keeping at most max_errors messages."""
        self.failed += 1
        if rejected:
            self.rejected += 1
        if len(self.errors) < self.max_errors:
            self.errors.append(message)
        else:
            self.errors_truncated += 1

    def summary(self) -> str:
        """One-line message for the admin UI."""
        text = f"Imported {self.success} of {self.total} rows"
        if self.success:
            text += f" ({self.inserted} new, {self.updated} updated)"
        if self.failed:
            text += f", {self.failed} failed"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "failed": self.failed,
            "errors": list(self.errors),
        }
