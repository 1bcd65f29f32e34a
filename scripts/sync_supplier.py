#!/usr/bin/env python3
"""
Supplier Sync Script

Scrapes a supplier's product pages and imports them into the catalog.
Products are tagged with the supplier id; re-running the sync updates
prices and stock of products imported earlier.

Usage:
    python3 scripts/sync_supplier.py --supplier vseinstrumenti --urls data/vi_urls.txt
    python3 scripts/sync_supplier.py --supplier 220volt --urls urls.txt --limit 50 --delay 2
    python3 scripts/sync_supplier.py --supplier 220volt --urls urls.txt --replace
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
from catalog_sync.models import SourceFormat
from catalog_sync.storage import (
    CatalogRepository,
    create_engine_from_url,
    init_db,
    make_session_factory,
    session_scope,
)
from catalog_sync.suppliers import SupplierScraper

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)


def load_urls(path: str) -> list[str]:
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]


def main():
    parser = argparse.ArgumentParser(
        description="Scrape supplier product pages and import them into the catalog"
    )
    parser.add_argument(
        "--supplier", "-s",
        required=True,
        help="Supplier id stored as the products' tag"
    )
    parser.add_argument(
        "--urls", "-u",
        required=True,
        help="Input file with product URLs (one per line)"
    )
    parser.add_argument(
        "--limit", "-l",
        type=int,
        default=0,
        help="Limit number of pages to scrape (0 = no limit)"
    )
    parser.add_argument(
        "--delay", "-d",
        type=float,
        default=1.5,
        help="Delay between requests in seconds (default: 1.5)"
    )
    parser.add_argument(
        "--replace",
        action="store_true",
        help="Delete the supplier's existing products before importing"
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
        "--log-file",
        help="Also write log records to this file"
    )

    args = parser.parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    if not os.path.exists(args.urls):
        print(f"URL file not found: {args.urls}")
        sys.exit(1)

    urls = load_urls(args.urls)
    if args.limit > 0:
        urls = urls[:args.limit]

    with SupplierScraper(args.supplier, delay=args.delay) as scraper:
        scraped = scraper.scrape(urls)

    engine = create_engine_from_url(args.database_url)
    init_db(engine)
    factory = make_session_factory(engine)

    with session_scope(factory) as session:
        repository = CatalogRepository(session)
        if args.replace and scraped.records:
            deleted = repository.delete_products_by_tag(args.supplier)
            logger.info("Deleted %d existing %s products", deleted, args.supplier)

        importer = BatchImporter.from_settings(repository, load_import_settings())
        try:
            result = importer.import_batch(scraped.records, SourceFormat.SCRAPED)
        except EmptyImportError as e:
            print(f"Nothing to import: {e} ({len(scraped.failed)} pages failed)")
            sys.exit(1)

    print("\n" + "=" * 60)
    print("SUPPLIER SYNC SUMMARY")
    print("=" * 60)
    print(f"  Supplier:           {args.supplier}")
    print(f"  Pages scraped:      {len(scraped.records)} of {len(urls)}")
    print(f"  {result.summary()}")
    for failure in scraped.failed[:10]:
        print(f"    - {failure['url']}: {failure['error']}")
    for error in result.errors:
        print(f"    - {error}")
    print("=" * 60)


if __name__ == "__main__":
    main()
