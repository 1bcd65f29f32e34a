"""Storefront read side: cached category aggregates."""

from .cache import CategoryAggregateCache, TTLCache

__all__ = ['CategoryAggregateCache', 'TTLCache']
