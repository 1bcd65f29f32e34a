#!/usr/bin/env python3
"""
Catalog Import Script

Imports a product file (CSV, XLSX or JSON) into the catalog database.
Columns are detected from header names, categories are created on demand,
and existing products (same SKU or slug) are updated in place.

Usage:
    python3 scripts/import_catalog.py --file data/makita_price.xlsx
    python3 scripts/import_catalog.py --file products.csv --database-url sqlite:///catalog.db
    python3 scripts/import_catalog.py --file feed.json --format json --verbose
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from catalog_sync.common import EmptyImportError, load_import_settings, setup_logging
from catalog_sync.importing import BatchImporter
from catalog_sync.models import BatchResult, SourceFormat
from catalog_sync.sources import read_rows
from catalog_sync.storage import (
    CatalogRepository,
    create_engine_from_url,
    init_db,
    make_session_factory,
    session_scope,
)

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)


def print_summary(result: BatchResult, source: str) -> None:
    """Print import summary."""
    print("\n" + "=" * 60)
    print("IMPORT SUMMARY")
    print("=" * 60)
    print(f"  Source:             {source}")
    print(f"  {result.summary()}")
    print(f"  Inserted:           {result.inserted}")
    print(f"  Updated:            {result.updated}")
    print(f"  Failed:             {result.failed} (rejected: {result.rejected})")
    if result.categories_created:
        print(f"  New categories:     {', '.join(result.categories_created)}")

    if result.errors:
        print("\n  Errors:")
        for error in result.errors:
            print(f"    - {error}")
        if result.errors_truncated:
            print(f"    ... and {result.errors_truncated} more")

    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(
        description="Import a CSV/XLSX/JSON product file into the catalog"
    )
    parser.add_argument(
        "--file", "-f",
        required=True,
        help="Product file (.csv, .xlsx or .json)"
    )
    parser.add_argument(
        "--format",
        choices=[f.value for f in SourceFormat if f is not SourceFormat.SCRAPED],
        help="Force the file format (default: from extension)"
    )
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy database URL (default: $CATALOG_DATABASE_URL)"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress info messages, show only warnings and errors"
    )
    parser.add_argument(
        "--sql-echo",
        action="store_true",
        help="Log every SQL statement"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet, sql_echo=args.sql_echo)

    try:
        rows, source_format = read_rows(
            args.file,
            SourceFormat(args.format) if args.format else None,
        )
    except (EmptyImportError, ValueError) as e:
        logger.error("%s", e)
        print(f"Import failed: {e}")
        sys.exit(1)

    settings = load_import_settings()
    engine = create_engine_from_url(args.database_url)
    init_db(engine)
    factory = make_session_factory(engine)

    with session_scope(factory) as session:
        importer = BatchImporter.from_settings(CatalogRepository(session), settings)
        result = importer.import_batch(rows, source_format)

    print_summary(result, args.file)
    sys.exit(0 if result.success else 1)


if __name__ == "__main__":
    main()
