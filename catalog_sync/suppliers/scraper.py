"""
Supplier Scraper

Fetches supplier product pages and turns them into scraped records that
the batch importer consumes with SourceFormat.SCRAPED.

Features:
- Shared requests session for TCP connection reuse
- Retries on rate limiting / gateway errors / timeouts
- Failed URL tracking with error messages
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests
from bs4 import BeautifulSoup

from .page_parser import ProductPageParser

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; CatalogSync/1.0)"


@dataclass
class ScrapeResult:
    records: List[Dict[str, Any]] = field(default_factory=list)
    failed: List[Dict[str, str]] = field(default_factory=list)


class SupplierScraper:
    """
    Scrapes one supplier's product pages.

    Usage:
        with SupplierScraper("vseinstrumenti", delay=1.0) as scraper:
            result = scraper.scrape(urls)
        importer.import_batch(result.records, SourceFormat.SCRAPED)
    """

    MAX_RETRIES = 3
    RETRYABLE_STATUS_CODES = {429, 502, 503, 504}

    def __init__(
        self,
        supplier_id: str,
        session: Optional[requests.Session] = None,
        delay: float = 1.0,
        timeout: int = 15,
        backoff: float = 2.0,
    ):
        """
        Args:
            supplier_id: Supplier key stored as the products' tag
            session: Shared HTTP session (created if omitted)
            delay: Pause between pages in seconds
            timeout: Request timeout in seconds
            backoff: Base of the exponential wait between retries
        """
        self.supplier_id = supplier_id
        self.delay = delay
        self.timeout = timeout
        self.backoff = backoff
        self.parser = ProductPageParser()

        self.session = session or requests.Session()
        self.session.headers.setdefault(
            "User-Agent", os.environ.get("CATALOG_SUPPLIER_USER_AGENT", DEFAULT_USER_AGENT)
        )

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def fetch(self, url: str) -> str:
        """
        GET a page, retrying transient failures.

        Raises:
            requests.RequestException: after the last failed attempt, or
                immediately for non-retryable HTTP errors
        """
        last_error: Optional[requests.RequestException] = None

        for attempt in range(self.MAX_RETRIES):
            try:
                response = self.session.get(url, timeout=self.timeout)
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                last_error = e
                logger.warning("Attempt %d/%d for %s failed: %s", attempt + 1, self.MAX_RETRIES, url, e)
            else:
                if response.status_code not in self.RETRYABLE_STATUS_CODES:
                    response.raise_for_status()
                    return response.text
                last_error = requests.exceptions.HTTPError(
                    f"HTTP {response.status_code} for {url}", response=response
                )
                logger.warning("HTTP %d for %s (attempt %d/%d)",
                               response.status_code, url, attempt + 1, self.MAX_RETRIES)

            if attempt < self.MAX_RETRIES - 1:
                time.sleep(self.backoff ** attempt if self.backoff else 0)

        raise last_error

    def parse_product(self, html: str, url: str) -> Dict[str, Any]:
        """
        Build a scraped record from a product page.

        Raises:
            ValueError: the page has no recognizable product name
        """
        soup = BeautifulSoup(html, "lxml")
        data = self.parser.parse(soup)
        name = self.parser.extract_name(data, soup)
        if not name:
            raise ValueError("No product name on page")

        return {
            "name": name,
            "sku": self.parser.extract_sku(data),
            "price": self.parser.extract_price(data),
            "originalPrice": self.parser.extract_original_price(data),
            "category": self.parser.extract_category(soup, name),
            "imageUrl": self.parser.extract_image(data),
            "description": self.parser.extract_description(data),
            "supplier": self.supplier_id,
            "brand": self.parser.extract_brand(data),
            "model": self.parser.extract_model(data),
            "warranty": self.parser.extract_warranty(data),
            "availability": self.parser.extract_availability(data),
            "sourceUrl": url,
        }

    def scrape(self, urls: List[str]) -> ScrapeResult:
        """Scrape every URL in order; failures are collected, not raised."""
        result = ScrapeResult()
        total = len(urls)

        for i, url in enumerate(urls, 1):
            logger.info("[%d/%d] %s", i, total, url[:80])
            try:
                html = self.fetch(url)
                record = self.parse_product(html, url)
            except (requests.RequestException, ValueError) as e:
                error_msg = f"{type(e).__name__}: {str(e)[:100]}"
                logger.error("Failed %s: %s", url, error_msg)
                result.failed.append({"url": url, "error": error_msg})
            else:
                result.records.append(record)

            if i < total and self.delay:
                time.sleep(self.delay)

        logger.info("Scraped %d products, %d failed", len(result.records), len(result.failed))
        return result
