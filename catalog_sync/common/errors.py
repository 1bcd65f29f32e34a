"""
Exception taxonomy for catalog synchronization.

Row-level problems never abort a batch; only EmptyImportError is fatal
to a whole import call. Rejected rows are not exceptions at all, see
catalog_sync.models.RejectedRow.
"""


class CatalogSyncError(Exception):
    """Base class for catalog synchronization errors."""


class EmptyImportError(CatalogSyncError):
    """Raised when an import has no file, zero decoded rows, or an undecodable file."""


class CategoryCreationConflict(CatalogSyncError):
    """Raised when a category insert loses a slug race against another import."""

    def __init__(self, name: str, slug: str):
        super().__init__(f"Category slug already taken: {slug!r} (for {name!r})")
        self.name = name
        self.slug = slug


class PersistenceError(CatalogSyncError):
    """Raised when a product insert or update fails in the store."""
