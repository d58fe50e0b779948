"""Product recommendation endpoints under /amazon."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from amazon_recommends.core.db import get_session
from amazon_recommends.schemas.product import ProductPayload
from amazon_recommends.services.product_repository import ProductRepository
from amazon_recommends.services.product_service import ProductService


router = APIRouter(prefix="/amazon", tags=["products"])


def get_product_repository(session: Session = Depends(get_session)) -> ProductRepository:
    """Dependency to get ProductRepository instance."""
    return ProductRepository(session)


def get_product_service(repository: ProductRepository = Depends(get_product_repository)) -> ProductService:
    """Dependency to get ProductService instance."""
    return ProductService(repository)


@router.post(
    "",
    response_model=ProductPayload,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    description="Create a new active product. The ASIN must not belong to another active product.",
)
def create_product(
    payload: Any = Body(default=None),
    service: ProductService = Depends(get_product_service),
) -> ProductPayload:
    """
    Create a new product.

    Args:
        payload: Raw JSON body, validated against the full rule set
        service: ProductService instance (injected)

    Returns:
        The created product's business fields

    Raises:
        ProductValidationError: 400 if any field rule is broken
        ProductAlreadyExistsError: 400 if the ASIN is already active
    """
    return service.create(payload)


@router.get(
    "/{asin}",
    response_model=ProductPayload,
    status_code=status.HTTP_200_OK,
    summary="Get an active product by ASIN",
)
def get_product(
    asin: str,
    service: ProductService = Depends(get_product_service),
) -> ProductPayload:
    return service.get(asin)


@router.put(
    "/{asin}",
    response_model=ProductPayload,
    status_code=status.HTTP_200_OK,
    summary="Replace a product (full update)",
    description="Overwrite every business field. The body's ASIN must match the path.",
)
def replace_product(
    asin: str,
    payload: Any = Body(default=None),
    service: ProductService = Depends(get_product_service),
) -> ProductPayload:
    """
    Replace all business fields of an active product.

    Returns:
        The submitted payload

    Raises:
        ProductNotFoundError: 404 if no active product has this ASIN
        ProductValidationError: 400 if any field rule is broken
    """
    return service.replace(asin, payload)


@router.patch(
    "/{asin}",
    response_model=ProductPayload,
    status_code=status.HTTP_200_OK,
    summary="Update a product (partial update)",
    description="Only fields present in the body are written. The ASIN cannot be changed.",
)
def patch_product(
    asin: str,
    payload: Any = Body(default=None),
    service: ProductService = Depends(get_product_service),
) -> ProductPayload:
    """
    Partially update an active product.

    A missing body is treated as an empty object.

    Returns:
        The product as stored after the update
    """
    return service.patch(asin, payload if payload is not None else {})


@router.patch(
    "/{asin}/delete",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Soft-delete a product",
)
def delete_product(
    asin: str,
    service: ProductService = Depends(get_product_service),
) -> None:
    """
    Mark an active product as deleted. Returns 204 No Content on success.

    Raises:
        ProductNotFoundError: 404 if no active product has this ASIN
    """
    service.delete(asin)


@router.patch(
    "/{asin}/undelete",
    response_model=ProductPayload,
    status_code=status.HTTP_200_OK,
    summary="Restore a soft-deleted product",
)
def undelete_product(
    asin: str,
    service: ProductService = Depends(get_product_service),
) -> ProductPayload:
    """
    Restore a deleted product.

    Returns:
        The product's business fields as read before the restore

    Raises:
        ProductNotFoundError: 404 if no deleted product has this ASIN
        ProductAlreadyExistsError: 400 if another active product uses the ASIN
    """
    return service.undelete(asin)
