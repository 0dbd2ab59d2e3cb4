"""initial schema: users, dishes, orders, order_dishes, dining_tables, reviews

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19 12:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum("admin", "user", name="user_role")
order_status = sa.Enum(
    "PENDING", "CONFIRMED", "PREPARING", "READY", "COMPLETED", "CANCELLED", name="order_status"
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("role", user_role, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "dishes",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("is_available", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("full_price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("addition", sa.String(500), nullable=True),
        sa.Column("status", order_status, nullable=False, server_default="PENDING"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_orders_user_id", "orders", ["user_id"])

    op.create_table(
        "order_dishes",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("dish_id", sa.Integer, sa.ForeignKey("dishes.id"), nullable=False),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
    )
    op.create_index("ix_order_dishes_order_id", "order_dishes", ["order_id"])

    op.create_table(
        "dining_tables",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("table_number", sa.Integer, nullable=False),
        sa.Column("seats", sa.Integer, nullable=False),
        sa.Column("is_reserved", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("reserved_by_user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("reserved_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("seats >= 1", name="ck_dining_tables_seats_positive"),
        sa.CheckConstraint(
            "(is_reserved AND reserved_by_user_id IS NOT NULL AND reserved_at IS NOT NULL)"
            " OR (NOT is_reserved AND reserved_by_user_id IS NULL AND reserved_at IS NULL)",
            name="ck_dining_tables_reservation_fields",
        ),
    )
    op.create_index("ix_dining_tables_table_number", "dining_tables", ["table_number"], unique=True)
    op.create_index("ix_dining_tables_reserved_by_user_id", "dining_tables", ["reserved_by_user_id"])

    op.create_table(
        "reviews",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("dish_id", sa.Integer, sa.ForeignKey("dishes.id"), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.String(1000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_reviews_user_id", "reviews", ["user_id"])
    op.create_index("ix_reviews_dish_id", "reviews", ["dish_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("reviews")
    op.drop_table("dining_tables")
    op.drop_table("order_dishes")
    op.drop_table("orders")
    op.drop_table("dishes")
    op.drop_table("users")
    order_status.drop(op.get_bind(), checkfirst=True)
    user_role.drop(op.get_bind(), checkfirst=True)
