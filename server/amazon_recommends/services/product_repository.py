"""Product repository: the only code that reads or writes the products table."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from amazon_recommends.models.product import Product
from amazon_recommends.schemas.product import ProductPayload


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductRepository:
    """Handles database operations for Product entities.

    Every mutating method performs one write and commits it. On failure the
    session is rolled back and the store error propagates unchanged.
    """

    def __init__(self, session: Session) -> None:
        """Initialize repository with a SQLAlchemy session.

        Args:
            session: Active database session for executing queries
        """
        self._session = session

    def find(self, asin: str, active: bool) -> Product | None:
        """Fetch the product with exactly this ASIN and status.

        Several soft-deleted rows may share an ASIN; the most recently
        inserted one wins.

        Args:
            asin: Business identifier
            active: True for live rows, False for soft-deleted ones

        Returns:
            Product instance if found, None otherwise
        """
        stmt = (
            select(Product)
            .where(Product.asin == asin, Product.status == active)
            .order_by(Product.id.desc())
            .limit(1)
        )
        return self._session.scalars(stmt).first()

    def create(self, payload: ProductPayload) -> Product:
        """Insert a new active product.

        Args:
            payload: Validated business fields

        Returns:
            Created Product instance

        Raises:
            IntegrityError: If an active product with the same ASIN already exists
        """
        now = utcnow()
        db_product = Product(
            **payload.model_dump(),
            status=True,
            created_at=now,
            updated_at=now,
        )
        self._session.add(db_product)
        self._commit()
        self._session.refresh(db_product)
        return db_product

    def replace(self, product: Product, payload: ProductPayload) -> Product:
        """Overwrite every business field of ``product``.

        ``status`` and ``created_at`` are left untouched.
        """
        for name, value in payload.model_dump().items():
            setattr(product, name, value)
        product.updated_at = utcnow()
        self._commit()
        return product

    def patch(self, product: Product, changes: Mapping[str, Any]) -> Product:
        """Write only the given columns and return the row as stored afterwards.

        Args:
            product: Row to update
            changes: Column name to new value, for fields the client sent

        Returns:
            The product re-read from the database
        """
        for name, value in changes.items():
            setattr(product, name, value)
        product.updated_at = utcnow()
        self._commit()
        self._session.refresh(product)
        return product

    def set_status(self, product: Product, active: bool) -> None:
        """Flip the soft-delete flag of a single row; timestamps are not touched.

        Raises:
            IntegrityError: If reactivating would leave two active rows with one ASIN
        """
        product.status = active
        self._commit()

    def _commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
