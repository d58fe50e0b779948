"""Database session/engine helpers."""
from __future__ import annotations

import logging
from typing import Generator

from fastapi import Request
from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from amazon_recommends.core.exceptions import StoreUnavailableError
from amazon_recommends.models.base import Base

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """Build the engine (and its connection pool) for the given URL."""

    return create_engine(database_url, future=True, pool_pre_ping=True, **kwargs)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to ``engine``."""

    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, class_=Session)


def init_db(engine: Engine) -> None:
    """Verify connectivity and create all tables and indexes that are missing.

    Raises:
        StoreUnavailableError: If the database cannot be reached or the schema cannot be created
    """
    safe_url = engine.url.render_as_string(hide_password=True)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        Base.metadata.create_all(engine)
    except SQLAlchemyError as e:
        raise StoreUnavailableError(safe_url, e) from e
    logger.info("Database schema ready at %s", safe_url)


def get_session(request: Request) -> Generator[Session, None, None]:
    """FastAPI dependency that yields a database session."""

    session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()
