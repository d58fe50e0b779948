"""Initial database schema with the products table."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column("id", sa.BigInteger().with_variant(sa.Integer(), "sqlite"), primary_key=True, autoincrement=True),
        sa.Column("product_name", sa.String(100), nullable=False),
        sa.Column("maker_name", sa.String(50), nullable=False),
        sa.Column("price", sa.BigInteger(), nullable=False),
        sa.Column("reason", sa.String(100), nullable=False),
        sa.Column("url", sa.String(2083), nullable=False),
        sa.Column("asin", sa.String(10), nullable=False),
        sa.Column("status", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_products_asin", "products", ["asin"])

    # At most one active row per ASIN; soft-deleted rows may repeat it
    op.create_index(
        "uq_products_asin_active",
        "products",
        ["asin"],
        unique=True,
        postgresql_where=sa.text("status"),
        sqlite_where=sa.text("status"),
    )


def downgrade() -> None:
    op.drop_index("uq_products_asin_active", table_name="products")
    op.drop_index("ix_products_asin", table_name="products")
    op.drop_table("products")
