"""Relational catalog store: ORM schema, engine helpers and repository."""

from .database import (
    create_engine_from_url,
    get_database_url,
    init_db,
    make_session_factory,
    session_scope,
)
from .repository import CatalogRepository
from .schema import Base, Category, Product

__all__ = [
    'Base',
    'CatalogRepository',
    'Category',
    'Product',
    'create_engine_from_url',
    'get_database_url',
    'init_db',
    'make_session_factory',
    'session_scope',
]
