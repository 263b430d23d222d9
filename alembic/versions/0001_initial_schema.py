"""initial catalogue schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""
import sqlalchemy as sa

from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sku", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("single", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_products_id", "products", ["id"])
    op.create_index("ix_products_sku", "products", ["sku"], unique=True)

    op.create_table(
        "attribute_types",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
    )

    op.create_table(
        "skus",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(255), nullable=False),
        sa.Column("length", sa.Numeric(8, 2), nullable=False),
        sa.Column("weight", sa.Numeric(8, 2), nullable=False),
        sa.Column("thickness", sa.Numeric(8, 2), nullable=False),
        sa.Column("attribute_value", sa.String(255)),
        sa.Column("attribute_type_id", sa.Integer(), sa.ForeignKey("attribute_types.id")),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("stock_warning_level", sa.Integer(), nullable=False),
        sa.Column("cost_value", sa.Numeric(8, 2), nullable=False),
        sa.Column("price", sa.Numeric(8, 2), nullable=False),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id")),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_skus_id", "skus", ["id"])
    op.create_index("ix_skus_attribute_type_id", "skus", ["attribute_type_id"])
    op.create_index("ix_skus_product_id", "skus", ["product_id"])

    op.create_table(
        "carts",
        sa.Column("id", sa.Integer(), primary_key=True),
        _timestamp("created_at"),
    )
    op.create_table(
        "cart_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("cart_id", sa.Integer(), sa.ForeignKey("carts.id")),
        sa.Column("sku_id", sa.Integer(), sa.ForeignKey("skus.id")),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("weight", sa.Numeric(8, 2)),
    )
    op.create_index("ix_cart_items_cart_id", "cart_items", ["cart_id"])
    op.create_index("ix_cart_items_sku_id", "cart_items", ["sku_id"])

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("reference", sa.String(64)),
        _timestamp("created_at"),
    )
    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id")),
        sa.Column("sku_id", sa.Integer(), sa.ForeignKey("skus.id")),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(8, 2)),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])
    op.create_index("ix_order_items_sku_id", "order_items", ["sku_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("notifiable_type", sa.String(64), nullable=False),
        sa.Column("notifiable_id", sa.Integer(), nullable=False),
        sa.Column("message", sa.String(255)),
        _timestamp("created_at"),
    )
    op.create_index("ix_notifications_notifiable_id", "notifications", ["notifiable_id"])

    op.create_table(
        "stock_levels",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("sku_id", sa.Integer(), sa.ForeignKey("skus.id"), nullable=False),
        sa.Column("description", sa.String(255)),
        sa.Column("adjustment", sa.Integer(), nullable=False),
        sa.Column("current_stock", sa.Integer()),
        _timestamp("created_at"),
    )
    op.create_index("ix_stock_levels_sku_id", "stock_levels", ["sku_id"])

    op.create_table(
        "countries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
    )
    op.create_index("ix_countries_id", "countries", ["id"])

    op.create_table(
        "shippings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("price", sa.Numeric(8, 2)),
    )
    op.create_table(
        "destinations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("country_id", sa.Integer(), sa.ForeignKey("countries.id"), nullable=False),
        sa.Column("shipping_id", sa.Integer(), sa.ForeignKey("shippings.id"), nullable=False),
    )
    op.create_index("ix_destinations_country_id", "destinations", ["country_id"])
    op.create_index("ix_destinations_shipping_id", "destinations", ["shipping_id"])


def downgrade() -> None:
    for table in (
        "destinations",
        "shippings",
        "countries",
        "stock_levels",
        "notifications",
        "order_items",
        "orders",
        "cart_items",
        "carts",
        "skus",
        "attribute_types",
        "products",
    ):
        op.drop_table(table)
