"""Initial schema.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

ROLE_NAMES = ("Admin", "Owner", "Developer", "User")


def _base_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("enabled", sa.Boolean(), server_default="true", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("last_update", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _route_columns() -> list[sa.Column]:
    return [
        sa.Column("order", sa.Integer(), nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("effective_start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("effective_end_date", sa.DateTime(timezone=True), nullable=True),
    ]


def _enabled_name_index(table: str) -> None:
    op.create_index(
        f"ux_{table}_name_enabled",
        table,
        [sa.text("lower(name)")],
        unique=True,
        postgresql_where=sa.text("enabled"),
    )


def upgrade() -> None:
    """Create reference-data, planning and identity tables."""
    # --- reference data ---
    op.create_table(
        "lines",
        *_base_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _enabled_name_index("lines")

    op.create_table(
        "operation_types",
        *_base_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _enabled_name_index("operation_types")

    op.create_table(
        "products",
        *_base_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("unit_price_per_ton", sa.Numeric(18, 2), nullable=False),
        sa.Column("profit_margin", sa.Numeric(18, 4), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False),
        sa.Column("penalty_cost", sa.Numeric(18, 2), nullable=False, comment="Cost per day of late delivery"),
        sa.PrimaryKeyConstraint("id"),
    )
    _enabled_name_index("products")

    op.create_table(
        "work_centers",
        *_base_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("optimal_batch", sa.Numeric(18, 2), nullable=False, comment="Optimal batch size in tons"),
        sa.Column("line_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["line_id"], ["lines.id"], ondelete="RESTRICT"),
    )
    op.create_index("ix_work_centers_line_id", "work_centers", ["line_id"])
    _enabled_name_index("work_centers")

    op.create_table(
        "operations",
        *_base_columns(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("setup_time_in_minutes", sa.Float(), nullable=False),
        sa.Column("capacity", sa.Float(), nullable=False, comment="Capacity in tons per hour"),
        sa.Column("operation_type_id", sa.Integer(), nullable=False),
        sa.Column("work_center_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["operation_type_id"], ["operation_types.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["work_center_id"], ["work_centers.id"], ondelete="RESTRICT"),
    )
    op.create_index("ix_operations_operation_type_id", "operations", ["operation_type_id"])
    op.create_index("ix_operations_work_center_id", "operations", ["work_center_id"])
    _enabled_name_index("operations")

    # --- routes ---
    op.create_table(
        "line_work_center_routes",
        *_base_columns(),
        sa.Column("line_id", sa.Integer(), nullable=False),
        sa.Column("work_center_id", sa.Integer(), nullable=False),
        *_route_columns(),
        sa.Column("transport_time_in_minutes", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["line_id"], ["lines.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["work_center_id"], ["work_centers.id"], ondelete="RESTRICT"),
    )
    op.create_index("ix_line_work_center_routes_line_id", "line_work_center_routes", ["line_id"])
    op.create_index("ix_line_work_center_routes_work_center_id", "line_work_center_routes", ["work_center_id"])

    op.create_table(
        "work_center_operation_routes",
        *_base_columns(),
        sa.Column("work_center_id", sa.Integer(), nullable=False),
        sa.Column("operation_type_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(50), nullable=True),
        *_route_columns(),
        sa.Column("transport_time_in_minutes", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["work_center_id"], ["work_centers.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["operation_type_id"], ["operation_types.id"], ondelete="RESTRICT"),
    )
    op.create_index("ix_work_center_operation_routes_work_center_id", "work_center_operation_routes", ["work_center_id"])
    op.create_index("ix_work_center_operation_routes_operation_type_id", "work_center_operation_routes", ["operation_type_id"])

    op.create_table(
        "product_operation_routes",
        *_base_columns(),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("operation_type_id", sa.Integer(), nullable=False),
        *_route_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["operation_type_id"], ["operation_types.id"], ondelete="RESTRICT"),
    )
    op.create_index("ix_product_operation_routes_product_id", "product_operation_routes", ["product_id"])
    op.create_index("ix_product_operation_routes_operation_type_id", "product_operation_routes", ["operation_type_id"])

    op.create_table(
        "product_available_per_line",
        *_base_columns(),
        sa.Column("line_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["line_id"], ["lines.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="RESTRICT"),
        sa.UniqueConstraint("product_id", "line_id", name="uq_product_available_per_line"),
    )
    op.create_index("ix_product_available_per_line_line_id", "product_available_per_line", ["line_id"])
    op.create_index("ix_product_available_per_line_product_id", "product_available_per_line", ["product_id"])

    # --- planning records ---
    op.create_table(
        "production_orders",
        *_base_columns(),
        sa.Column("order_number", sa.String(50), nullable=False),
        sa.Column("earliest_start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("order_number"),
    )

    op.create_table(
        "production_order_items",
        *_base_columns(),
        sa.Column("production_order_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Numeric(18, 2), nullable=False, comment="Quantity in tons"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["production_order_id"], ["production_orders.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="RESTRICT"),
    )
    op.create_index("ix_production_order_items_production_order_id", "production_order_items", ["production_order_id"])
    op.create_index("ix_production_order_items_product_id", "production_order_items", ["product_id"])

    op.create_table(
        "surplus_per_product_and_work_center",
        *_base_columns(),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("work_center_id", sa.Integer(), nullable=False),
        sa.Column("surplus", sa.Numeric(18, 2), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["work_center_id"], ["work_centers.id"], ondelete="RESTRICT"),
    )
    op.create_index("ix_surplus_per_product_and_work_center_product_id", "surplus_per_product_and_work_center", ["product_id"])
    op.create_index("ix_surplus_per_product_and_work_center_work_center_id", "surplus_per_product_and_work_center", ["work_center_id"])

    # --- identity ---
    roles = op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("normalized_name", sa.String(256), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("normalized_name"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(256), nullable=False),
        sa.Column("normalized_username", sa.String(256), nullable=False),
        sa.Column("email", sa.String(256), nullable=False),
        sa.Column("password_hash", sa.String(512), nullable=False),
        sa.Column("access_failed_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("lockout_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("normalized_username"),
    )

    op.create_table(
        "user_roles",
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("user_id", "role_id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"], ondelete="CASCADE"),
    )

    op.create_table(
        "user_claims",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("claim_type", sa.String(100), nullable=False),
        sa.Column("claim_value", sa.String(256), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_user_claims_user_id", "user_claims", ["user_id"])

    op.bulk_insert(
        roles,
        [{"name": name, "normalized_name": name.upper()} for name in ROLE_NAMES],
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("user_claims")
    op.drop_table("user_roles")
    op.drop_table("users")
    op.drop_table("roles")
    op.drop_table("surplus_per_product_and_work_center")
    op.drop_table("production_order_items")
    op.drop_table("production_orders")
    op.drop_table("product_available_per_line")
    op.drop_table("product_operation_routes")
    op.drop_table("work_center_operation_routes")
    op.drop_table("line_work_center_routes")
    op.drop_table("operations")
    op.drop_table("work_centers")
    op.drop_table("products")
    op.drop_table("operation_types")
    op.drop_table("lines")
