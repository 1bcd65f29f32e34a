"""Supplier catalog scraping: product pages -> scraped records for import."""

from .page_parser import ProductPageParser
from .scraper import ScrapeResult, SupplierScraper

__all__ = ['ProductPageParser', 'ScrapeResult', 'SupplierScraper']
