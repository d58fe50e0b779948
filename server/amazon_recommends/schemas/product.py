"""Pydantic schemas for product resources.

Field rules live in ``services.product_validator``; these models only give the
validated payloads a typed shape and map the camelCase JSON names onto the
snake_case column names.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProductPayload(BaseModel):
    """Full set of business fields, used for create, full update and responses."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    product_name: str = Field(alias="productName", description="Display name of the product")
    maker_name: str = Field(alias="makerName", description="Manufacturer or brand")
    price: int = Field(description="Price in the smallest currency unit")
    reason: str = Field(description="Why the product is recommended")
    url: str = Field(description="Link to the product page")
    asin: str = Field(description="Amazon Standard Identification Number, write-once")


class ProductPatch(BaseModel):
    """Payload used for partial updates (all fields optional, asin excluded).

    Only the camelCase JSON names populate it.
    """

    product_name: str | None = Field(default=None, alias="productName")
    maker_name: str | None = Field(default=None, alias="makerName")
    price: int | None = Field(default=None)
    reason: str | None = Field(default=None)
    url: str | None = Field(default=None)

    def changes(self) -> dict[str, object]:
        """Return only the fields the client actually sent with a value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
