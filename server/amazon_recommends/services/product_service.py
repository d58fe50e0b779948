"""Product lifecycle: create, read, update, soft delete and restore."""
from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy.exc import IntegrityError

from amazon_recommends.core.exceptions import (
    ProductAlreadyExistsError,
    ProductNotFoundError,
    ProductValidationError,
)
from amazon_recommends.models.product import Product
from amazon_recommends.schemas.product import ProductPatch, ProductPayload
from amazon_recommends.services.product_repository import ProductRepository
from amazon_recommends.services.product_validator import (
    ProductValidator,
    Violation,
    full_validator,
    partial_validator,
)

logger = logging.getLogger(__name__)


class ProductService:
    """Applies validation and existence rules before touching the repository.

    A product is either active or soft-deleted. Create, read, both updates and
    delete require an active row; undelete requires a deleted one.
    """

    def __init__(
        self,
        repository: ProductRepository,
        full: ProductValidator = full_validator,
        partial: ProductValidator = partial_validator,
    ) -> None:
        self._repository = repository
        self._full = full
        self._partial = partial

    def create(self, payload: Any) -> ProductPayload:
        """Validate and insert a new active product.

        Raises:
            ProductValidationError: If the payload breaks any field rule
            ProductAlreadyExistsError: If an active product already uses the ASIN
        """
        self._validate(self._full, payload)
        product = ProductPayload.model_validate(self._full.select(payload))

        if self._repository.find(product.asin, active=True) is not None:
            logger.warning("Rejected create: active product %s already exists", product.asin)
            raise ProductAlreadyExistsError(product.asin)

        try:
            self._repository.create(product)
        except IntegrityError as e:
            # Lost a race against a concurrent create for the same ASIN
            logger.warning("Unique index rejected create for %s", product.asin)
            raise ProductAlreadyExistsError(product.asin) from e

        logger.info("Created product %s", product.asin)
        return product

    def get(self, asin: str) -> ProductPayload:
        """Return the business fields of the active product."""
        return ProductPayload.model_validate(self._require(asin, active=True))

    def replace(self, asin: str, payload: Any) -> ProductPayload:
        """Overwrite every business field of the active product.

        The ASIN in the body must match the one in the path.

        Returns:
            The submitted payload
        """
        db_product = self._require(asin, active=True)

        result = self._full.validate(payload)
        violations = list(result.violations)
        submitted_asin = payload.get("asin") if isinstance(payload, Mapping) else None
        if isinstance(submitted_asin, str) and submitted_asin != asin:
            violations.append(Violation("asin", "immutable", asin))
        if violations:
            self._reject(violations)

        product = ProductPayload.model_validate(self._full.select(payload))
        self._repository.replace(db_product, product)
        logger.info("Replaced product %s", asin)
        return product

    def patch(self, asin: str, payload: Any) -> ProductPayload:
        """Update only the fields present in ``payload``.

        Fields that are missing or null keep their stored values.

        Returns:
            The product as stored after the update
        """
        db_product = self._require(asin, active=True)
        self._validate(self._partial, payload)

        changes = ProductPatch.model_validate(self._partial.select(payload)).changes()
        updated = self._repository.patch(db_product, changes)
        logger.info("Patched product %s (fields: %s)", asin, ", ".join(sorted(changes)) or "none")
        return ProductPayload.model_validate(updated)

    def delete(self, asin: str) -> None:
        """Soft-delete the active product."""
        db_product = self._require(asin, active=True)
        self._repository.set_status(db_product, active=False)
        logger.info("Deleted product %s", asin)

    def undelete(self, asin: str) -> ProductPayload:
        """Restore a soft-deleted product.

        Returns:
            The business fields as they were read before the restore

        Raises:
            ProductNotFoundError: If there is no deleted product with this ASIN
            ProductAlreadyExistsError: If another active product already uses the ASIN
        """
        db_product = self._require(asin, active=False)
        snapshot = ProductPayload.model_validate(db_product)

        try:
            self._repository.set_status(db_product, active=True)
        except IntegrityError as e:
            logger.warning("Rejected undelete: active product %s already exists", asin)
            raise ProductAlreadyExistsError(asin) from e

        logger.info("Restored product %s", asin)
        return snapshot

    def _require(self, asin: str, active: bool) -> Product:
        db_product = self._repository.find(asin, active=active)
        if db_product is None:
            logger.warning("No %s product with ASIN %s", "active" if active else "deleted", asin)
            raise ProductNotFoundError(asin, active=active)
        return db_product

    def _validate(self, validator: ProductValidator, payload: Any) -> None:
        result = validator.validate(payload)
        if not result.is_valid:
            self._reject(result.violations)

    @staticmethod
    def _reject(violations: list[Violation]) -> None:
        logger.warning(
            "Rejected payload: %s",
            ", ".join(f"{v.field}:{v.rule}" for v in violations),
        )
        raise ProductValidationError(violations)
