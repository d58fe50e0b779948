"""Services module for business logic."""
from __future__ import annotations

from .product_repository import ProductRepository
from .product_service import ProductService
from .product_validator import (
    FULL_CONSTRAINTS,
    PARTIAL_CONSTRAINTS,
    ProductValidator,
    ValidationResult,
    Violation,
)

__all__ = [
    "FULL_CONSTRAINTS",
    "PARTIAL_CONSTRAINTS",
    "ProductRepository",
    "ProductService",
    "ProductValidator",
    "ValidationResult",
    "Violation",
]
