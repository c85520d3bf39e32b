"""hive_core_tables

Revision ID: 3c1e7a9b2d40
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "3c1e7a9b2d40"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "hives",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("account_id", sa.BigInteger(), nullable=False),
        sa.Column("referrer_account_id", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("beacon_points", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("active_status", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("trial_ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_testing", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("beacon_points >= 0", name="ck_hives_beacon_points_non_negative"),
        sa.CheckConstraint("referrer_account_id <> account_id", name="ck_hives_no_self_referral"),
    )
    op.create_index("idx_hives_account_testing", "hives", ["account_id", "is_testing"])
    op.create_index("idx_hives_referrer", "hives", ["referrer_account_id"])

    op.create_table(
        "flat_hives",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("account_id", sa.BigInteger(), nullable=False),
        sa.Column("ancestor_account_id", sa.BigInteger(), nullable=False),
        sa.Column("depth", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("is_testing", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.CheckConstraint("depth > 0", name="ck_flat_hives_depth_positive"),
        sa.UniqueConstraint(
            "account_id",
            "ancestor_account_id",
            "is_testing",
            name="uq_flat_hives_account_ancestor_testing",
        ),
    )
    op.create_index("idx_flat_hives_ancestor", "flat_hives", ["ancestor_account_id", "is_testing"])

    op.create_table(
        "transactions",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("account_id", sa.BigInteger(), nullable=False),
        sa.Column("address", sa.String(64), nullable=False),
        sa.Column("product_slug", sa.String(64), nullable=True),
        sa.Column("amount", sa.Numeric(36, 18), nullable=False, server_default=sa.text("0")),
        sa.Column("trx_hash", sa.String(80), nullable=True),
        sa.Column("trx_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "idx_transactions_account_address_trx_at",
        "transactions",
        ["account_id", "address", "trx_at"],
    )


def downgrade() -> None:
    op.drop_index("idx_transactions_account_address_trx_at", table_name="transactions")
    op.drop_table("transactions")
    op.drop_index("idx_flat_hives_ancestor", table_name="flat_hives")
    op.drop_table("flat_hives")
    op.drop_index("idx_hives_referrer", table_name="hives")
    op.drop_index("idx_hives_account_testing", table_name="hives")
    op.drop_table("hives")
