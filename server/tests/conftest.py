"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import os
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from amazon_recommends.core.config import Settings
from amazon_recommends.core.db import create_session_factory
from amazon_recommends.main import create_app
from amazon_recommends.models.base import Base

# In-memory SQLite by default; point at PostgreSQL to match production
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite://")


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Create an engine with a freshly created schema for each test."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection so every session sees the same in-memory database
        engine = create_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(TEST_DATABASE_URL, future=True, pool_pre_ping=True)

    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine: Engine) -> Generator[Session, None, None]:
    """Provide a database session bound to the test engine."""
    session = create_session_factory(db_engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_engine: Engine) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client backed by the test engine."""
    settings = Settings(database_url=TEST_DATABASE_URL, auto_create_schema=False)
    app = create_app(settings, engine=db_engine)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def product_payload() -> dict[str, Any]:
    """A payload that passes full validation."""
    return {
        "productName": "Widget",
        "makerName": "Acme",
        "price": 999,
        "reason": "gift",
        "url": "http://x.com/w",
        "asin": "AB12345678",
    }
