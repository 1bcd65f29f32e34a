"""
Catalog Synchronization Engine

Merges product data from uploaded files and scraped supplier catalogs
into the storefront's product/category store.

Modules:
    models     - Data models (NormalizedProduct, BatchResult, CategoryWithImage)
    common     - Shared utilities (config loader, logging, text parsing, CSV)
    storage    - ORM schema and catalog repository
    importing  - Slugs, category resolution, row normalization, upsert, batch import
    catalog    - Read-side category aggregate cache
    sources    - File readers producing decoded rows
    suppliers  - Supplier catalog scraping
"""
