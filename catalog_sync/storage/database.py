"""
Engine and session helpers.

The database URL comes from CATALOG_DATABASE_URL (scripts load it from a
.env file with python-dotenv).
"""

import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .schema import Base

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///catalog.db"


def get_database_url() -> str:
    return os.environ.get("CATALOG_DATABASE_URL") or DEFAULT_DATABASE_URL


def create_engine_from_url(url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Create an engine for the catalog database.

    In-memory SQLite URLs get a single shared connection so every session
    sees the same database.
    """
    url = url or get_database_url()

    if url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=echo, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    """Create catalog tables that do not exist yet."""
    Base.metadata.create_all(engine)
    logger.debug("Catalog tables ensured on %s", engine.url.render_as_string(hide_password=True))


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    """Session that commits on success, rolls back on error and always closes."""
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
