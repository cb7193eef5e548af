"""Initial schema - accounts, catalog, inventory, orders, payroll, ledger, settings.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    cols = [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]
    if updated:
        cols.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        )
    return cols


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("account_name", sa.String(120), nullable=False),
        sa.Column("account_type", sa.String(20), nullable=False, server_default="business"),
        sa.Column("owner_name", sa.String(120), nullable=False, server_default=""),
        sa.Column("opening_balance_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("balance_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("profit_role", sa.String(20), nullable=True, unique=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
        sa.Column("country", sa.String(120), nullable=True),
        sa.Column("phone", sa.String(40), nullable=True),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("total_spent_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("is_repeat_customer", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "product_categories",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("parent_category_id", sa.Uuid, sa.ForeignKey("product_categories.id"), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("product_code", sa.String(60), nullable=True),
        sa.Column("category_id", sa.Uuid, sa.ForeignKey("product_categories.id"), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_custom", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("standard_price_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("labor_cost_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("material_cost_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "warehouses",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "inventory",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("product_id", sa.Uuid, sa.ForeignKey("products.id"), nullable=False),
        sa.Column("warehouse_id", sa.Uuid, sa.ForeignKey("warehouses.id"), nullable=False),
        sa.Column("stock_quantity", sa.Integer, nullable=False, server_default="0"),
        sa.Column("average_cost_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("minimum_stock_level", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
        sa.UniqueConstraint("product_id", "warehouse_id", name="uq_inventory_product_warehouse"),
    )
    op.create_index("ix_inventory_product_id", "inventory", ["product_id"])

    op.create_table(
        "inventory_batches",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("product_id", sa.Uuid, sa.ForeignKey("products.id"), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("labor_cost_per_item_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("total_labor_cost_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_inventory_batches_product_id", "inventory_batches", ["product_id"])

    op.create_table(
        "stock_movements",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("product_id", sa.Uuid, sa.ForeignKey("products.id"), nullable=False),
        sa.Column("warehouse_id", sa.Uuid, sa.ForeignKey("warehouses.id"), nullable=False),
        sa.Column("movement_type", sa.String(20), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("unit_cost_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("reference_type", sa.String(30), nullable=True),
        sa.Column("reference_id", sa.Uuid, nullable=True),
        sa.Column("movement_date", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_stock_movements_product_id", "stock_movements", ["product_id"])
    op.create_index("ix_stock_movements_reference_id", "stock_movements", ["reference_id"])

    op.create_table(
        "workers",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(40), nullable=True),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("hourly_rate_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("total_earned_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("total_advances_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("current_balance_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("hire_date", sa.Date, nullable=False, server_default=sa.func.current_date()),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "orders",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("order_number", sa.String(30), nullable=False, unique=True),
        sa.Column("customer_id", sa.Uuid, sa.ForeignKey("customers.id"), nullable=False),
        sa.Column("order_date", sa.Date, nullable=False),
        sa.Column("delivery_date", sa.Date, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("platform", sa.String(20), nullable=False, server_default="local"),
        sa.Column("priority", sa.String(20), nullable=False, server_default="normal"),
        sa.Column("total_amount_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("total_labor_cost_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("total_material_cost_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("shipping_cost_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("other_cost_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("discount_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("paid_amount_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_notes", sa.Text, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("assigned_worker_id", sa.Uuid, sa.ForeignKey("workers.id"), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_orders_customer_id", "orders", ["customer_id"])

    op.create_table(
        "order_items",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("order_id", sa.Uuid, sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("product_id", sa.Uuid, sa.ForeignKey("products.id"), nullable=True),
        sa.Column("item_name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("unit_price_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("labor_cost_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("material_cost_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("assigned_worker_id", sa.Uuid, sa.ForeignKey("workers.id"), nullable=True),
        sa.Column("is_completed", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("ix_order_items_order_id", "order_items", ["order_id"])

    op.create_table(
        "worker_daily_work",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("worker_id", sa.Uuid, sa.ForeignKey("workers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("work_date", sa.Date, nullable=False),
        sa.Column("attendance_type", sa.String(20), nullable=False, server_default="full_day"),
        sa.Column("hours_worked", sa.Float, nullable=False, server_default="8"),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("worker_id", "work_date", name="uq_daily_work_worker_date"),
    )
    op.create_index("ix_worker_daily_work_worker_id", "worker_daily_work", ["worker_id"])

    op.create_table(
        "worker_payment_records",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("worker_id", sa.Uuid, sa.ForeignKey("workers.id"), nullable=False),
        sa.Column("order_id", sa.Uuid, sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("order_item_id", sa.Uuid, sa.ForeignKey("order_items.id", ondelete="SET NULL"), nullable=True),
        sa.Column("product_name", sa.String(200), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False),
        sa.Column("labor_cost_per_item_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("total_labor_cost_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("advance_payment_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("remaining_balance_minor", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_worker_payment_records_worker_id", "worker_payment_records", ["worker_id"])
    op.create_index("ix_worker_payment_records_order_id", "worker_payment_records", ["order_id"])

    op.create_table(
        "standalone_payments",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("worker_id", sa.Uuid, sa.ForeignKey("workers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("amount_minor", sa.BigInteger, nullable=False),
        sa.Column("payment_type", sa.String(20), nullable=False),
        sa.Column("payment_date", sa.Date, nullable=False, server_default=sa.func.current_date()),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_standalone_payments_worker_id", "standalone_payments", ["worker_id"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("transaction_number", sa.String(30), nullable=False, unique=True),
        sa.Column("transaction_date", sa.Date, nullable=False),
        sa.Column("transaction_type", sa.String(20), nullable=False),
        sa.Column("from_account_id", sa.Uuid, sa.ForeignKey("accounts.id"), nullable=True),
        sa.Column("to_account_id", sa.Uuid, sa.ForeignKey("accounts.id"), nullable=True),
        sa.Column("amount_minor", sa.BigInteger, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("category", sa.String(60), nullable=True),
        sa.Column("reference_type", sa.String(30), nullable=True),
        sa.Column("reference_id", sa.Uuid, nullable=True),
        sa.Column("payment_method", sa.String(20), nullable=False, server_default="cash"),
        *_timestamps(),
        sa.CheckConstraint("amount_minor > 0", name="ck_transactions_amount_positive"),
    )
    op.create_index("ix_transactions_from_account_id", "transactions", ["from_account_id"])
    op.create_index("ix_transactions_to_account_id", "transactions", ["to_account_id"])
    op.create_index("ix_transactions_reference_id", "transactions", ["reference_id"])

    op.create_table(
        "profit_distributions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("order_id", sa.Uuid, sa.ForeignKey("orders.id"), nullable=False, unique=True),
        sa.Column("total_profit_minor", sa.BigInteger, nullable=False),
        sa.Column("partner_one_share_minor", sa.BigInteger, nullable=False),
        sa.Column("partner_two_share_minor", sa.BigInteger, nullable=False),
        sa.Column("business_share_minor", sa.BigInteger, nullable=False),
        sa.Column("distribution_date", sa.Date, nullable=False),
        sa.Column("is_distributed", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(updated=False),
    )

    op.create_table(
        "system_settings",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("setting_key", sa.String(80), nullable=False, unique=True),
        sa.Column("setting_value", sa.JSON, nullable=False),
        sa.Column("setting_type", sa.String(40), nullable=False, server_default="json"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "document_sequences",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("sequence_key", sa.String(30), nullable=False),
        sa.Column("year", sa.Integer, nullable=False),
        sa.Column("last_value", sa.Integer, nullable=False, server_default="0"),
        sa.UniqueConstraint("sequence_key", "year", name="uq_document_sequence_key_year"),
    )


def downgrade() -> None:
    for table in (
        "document_sequences", "system_settings", "profit_distributions",
        "transactions", "standalone_payments", "worker_payment_records",
        "worker_daily_work", "order_items", "orders", "workers",
        "stock_movements", "inventory_batches", "inventory", "warehouses",
        "products", "product_categories", "customers", "accounts",
    ):
        op.drop_table(table)
