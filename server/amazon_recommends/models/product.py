"""Product model definition."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Product(Base):
    """A recommended product, soft-deleted by flipping ``status``."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    product_name: Mapped[str] = mapped_column(String(100), nullable=False)
    maker_name: Mapped[str] = mapped_column(String(50), nullable=False)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    reason: Mapped[str] = mapped_column(String(100), nullable=False)
    url: Mapped[str] = mapped_column(String(2083), nullable=False)
    asin: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        # Soft-deleted rows may share an ASIN; active ones may not
        Index(
            "uq_products_asin_active",
            "asin",
            unique=True,
            postgresql_where=text("status"),
            sqlite_where=text("status"),
        ),
    )

    def __repr__(self) -> str:
        return f"<Product id={self.id} asin={self.asin} status={self.status}>"
