"""Domain exceptions for the product lifecycle service.

Each exception carries the HTTP status code it is reported with.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from amazon_recommends.services.product_validator import Violation


class ProductServiceError(Exception):
    """Base exception for product service errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class ProductValidationError(ProductServiceError):
    """Raised when a payload violates one or more field rules."""

    def __init__(self, violations: list[Violation]) -> None:
        super().__init__(
            message="Validation failed",
            status_code=400,
            details={"errors": [v.as_dict() for v in violations]},
        )
        self.violations = violations


class ProductAlreadyExistsError(ProductServiceError):
    """Raised when an active product with the same ASIN already exists."""

    def __init__(self, asin: str) -> None:
        super().__init__(
            message=f"Error: {asin} already exists",
            status_code=400,
            details={"asin": asin},
        )
        self.asin = asin


class ProductNotFoundError(ProductServiceError):
    """Raised when no product with the requested ASIN and status exists."""

    def __init__(self, asin: str, active: bool = True) -> None:
        state = "active" if active else "deleted"
        super().__init__(
            message=f"Error: {state} product {asin} not found",
            status_code=404,
            details={"asin": asin, "active": active},
        )
        self.asin = asin
        self.active = active


class StoreUnavailableError(ProductServiceError):
    """Raised at startup when the database cannot be reached or prepared."""

    def __init__(self, database_url: str, error: Exception) -> None:
        super().__init__(
            message=f"Database unavailable at '{database_url}': {error}",
            status_code=500,
            details={
                "database_url": database_url,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
