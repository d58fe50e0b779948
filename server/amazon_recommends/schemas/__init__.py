"""Public schema exports."""

from .product import ProductPatch, ProductPayload

__all__ = [
    "ProductPatch",
    "ProductPayload",
]
