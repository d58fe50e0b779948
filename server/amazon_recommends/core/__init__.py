"""Core application utilities and infrastructure."""
from .config import Settings, get_settings
from .exceptions import (
    ProductAlreadyExistsError,
    ProductNotFoundError,
    ProductServiceError,
    ProductValidationError,
    StoreUnavailableError,
)

__all__ = [
    "Settings",
    "get_settings",
    "ProductServiceError",
    "ProductValidationError",
    "ProductAlreadyExistsError",
    "ProductNotFoundError",
    "StoreUnavailableError",
]
