"""Initial schema — listings, orders, alert_reads

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- listings (one vendor offer of one canonical product) ---
    op.create_table(
        "listings",
        sa.Column("listing_id", sa.String(), nullable=False, primary_key=True),
        sa.Column("canonical_name", sa.String(), nullable=False),
        sa.Column("vendor_id", sa.String(), nullable=False),
        sa.Column("vendor_name", sa.String(), nullable=False),
        sa.Column("price", sa.DECIMAL(18, 6), nullable=False),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("color", sa.String(), nullable=True),
        sa.Column("stems_per_bunch", sa.INTEGER(), nullable=True),
        sa.Column("units_per_box", sa.INTEGER(), nullable=True),
        sa.Column("box_type", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=True,
        ),
    )
    op.create_index("ix_listings_canonical_price", "listings", ["canonical_name", "price"])
    op.create_index("ix_listings_vendor_canonical", "listings", ["vendor_id", "canonical_name"])

    # --- orders (line items inline as JSON) ---
    op.create_table(
        "orders",
        sa.Column("order_id", sa.String(), nullable=False, primary_key=True),
        sa.Column("buyer_id", sa.String(), nullable=False),
        sa.Column("buyer_name", sa.String(), nullable=False),
        sa.Column("items", sa.JSON(), nullable=False),
        sa.Column("total", sa.DECIMAL(20, 6), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("ordered_at", sa.TIMESTAMP(timezone=True), nullable=False),
    )
    op.create_index("ix_orders_buyer_ordered", "orders", ["buyer_id", "ordered_at"])

    # --- alert_reads (price-tied acknowledgement state) ---
    op.create_table(
        "alert_reads",
        sa.Column("vendor_id", sa.String(), nullable=False),
        sa.Column("canonical_name", sa.String(), nullable=False),
        sa.Column("read_at_price", sa.DECIMAL(18, 6), nullable=False),
        sa.Column("read_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("vendor_id", "canonical_name"),
    )


def downgrade() -> None:
    op.drop_table("alert_reads")
    op.drop_index("ix_orders_buyer_ordered", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_listings_vendor_canonical", table_name="listings")
    op.drop_index("ix_listings_canonical_price", table_name="listings")
    op.drop_table("listings")
