#!/usr/bin/env python3
"""
Show the storefront category strip: categories with live product counts
and a representative image, optionally for one supplier.

Usage:
    python3 scripts/show_categories.py
    python3 scripts/show_categories.py --supplier vseinstrumenti
"""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from catalog_sync.catalog import CategoryAggregateCache
from catalog_sync.common import load_import_settings, setup_logging
from catalog_sync.storage import CatalogRepository, create_engine_from_url, init_db, make_session_factory

load_dotenv(Path(__file__).parent.parent / ".env")


def main():
    parser = argparse.ArgumentParser(description="Print categories with product counts and images")
    parser.add_argument("--supplier", help="Only count this supplier's products")
    parser.add_argument("--database-url", help="SQLAlchemy database URL (default: $CATALOG_DATABASE_URL)")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (debug) logging")
    args = parser.parse_args()
    setup_logging(verbose=args.verbose)

    engine = create_engine_from_url(args.database_url)
    init_db(engine)
    factory = make_session_factory(engine)

    with factory() as session:
        categories = CategoryAggregateCache(
            lambda: CatalogRepository(session),
            ttl_seconds=load_import_settings()['category_cache_ttl_seconds'],
        )
        strip = categories.get_categories_with_image(args.supplier)

    if not strip:
        print("No categories with active products")
        return

    for category in strip:
        print(f"{category.product_count:6d}  {category.name}  /{category.slug}  {category.image_url or '-'}")


if __name__ == "__main__":
    main()
