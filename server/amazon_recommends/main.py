"""Entrypoint for the FastAPI application."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import Engine

from amazon_recommends.api import health, products
from amazon_recommends.core.config import Settings, get_settings
from amazon_recommends.core.db import create_db_engine, create_session_factory, init_db
from amazon_recommends.core.exceptions import (
    ProductAlreadyExistsError,
    ProductNotFoundError,
    ProductServiceError,
    ProductValidationError,
)
from amazon_recommends.core.logging_config import RequestLoggingMiddleware, setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """Build the application.

    The database engine is created at startup from ``settings.database_url``
    unless one is passed in, in which case the caller keeps ownership of it.
    A database that cannot be reached or migrated aborts startup.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db_engine = engine or create_db_engine(settings.database_url)
        try:
            if settings.auto_create_schema:
                init_db(db_engine)
            app.state.engine = db_engine
            app.state.session_factory = create_session_factory(db_engine)
            logger.info("%s started (%s)", settings.app_name, settings.environment)
            yield
        finally:
            if engine is None:
                db_engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        description="Product recommendations keyed by ASIN, with soft delete and restore",
        lifespan=lifespan,
    )
    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(products.router)
    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain exceptions into HTTP responses."""

    @app.exception_handler(ProductValidationError)
    async def validation_error_handler(request: Request, exc: ProductValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, **exc.details},
        )

    @app.exception_handler(ProductNotFoundError)
    @app.exception_handler(ProductAlreadyExistsError)
    async def text_error_handler(request: Request, exc: ProductServiceError) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(ProductServiceError)
    async def service_error_handler(request: Request, exc: ProductServiceError) -> JSONResponse:
        logger.error("Unhandled service error: %s", exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed JSON never reaches the field validator
        errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())),
                "rule": error.get("type"),
                "limit": None,
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Validation failed", "errors": errors},
        )


def run() -> None:
    """Serve the application with uvicorn.

    Equivalent to ``uvicorn amazon_recommends.main:create_app --factory``.
    """
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
