# ruff: noqa: I001
"""POS ledger core tables.

Revision ID: 0001_ledger_core
Revises: None
Create Date: 2026-10-19
"""

from __future__ import annotations  # ruff: noqa: I001

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_ledger_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # customers
    op.create_table(
        "customers",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("xero_id", sa.String(), nullable=True),
        sa.Column("terms_type", sa.String(), nullable=True),
        sa.Column("terms_days", sa.Integer(), nullable=True),
        sa.CheckConstraint(
            "terms_days IS NULL OR terms_days >= 0",
            name="ck_customers_terms_days",
        ),
    )

    # charges
    op.create_table(
        "charges",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column(
            "customer_id",
            sa.String(),
            sa.ForeignKey("customers.id"),
            nullable=False,
        ),
        sa.Column("seq_no", sa.String(4), nullable=False),
        sa.Column("terminal_id", sa.String(), nullable=True),
        sa.Column("tran_timestamp", sa.DateTime(), nullable=True),
        sa.Column("tran_type", sa.Integer(), nullable=True),
    )
    op.create_index("ix_charges_match", "charges", ["date", "customer_id", "seq_no"])

    # departments + per-day department sales
    op.create_table(
        "departments",
        sa.Column("dept_code", sa.String(), primary_key=True),
        sa.Column("dept_display_name", sa.Text(), nullable=False),
        sa.Column("gl_code_sales", sa.String(), nullable=True),
        sa.Column("gl_code_purchases", sa.String(), nullable=True),
    )
    op.create_table(
        "department_sales",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "dept_code",
            sa.String(),
            sa.ForeignKey("departments.dept_code"),
            nullable=False,
        ),
        sa.Column("sell_ex", sa.Numeric(18, 2), nullable=False, server_default=sa.text("0")),
    )

    # combined till totals (one row per trading day)
    money = sa.Numeric(18, 2)
    op.create_table(
        "combined_till_totals",
        sa.Column("date", sa.Date(), primary_key=True),
        sa.Column("customer_count", sa.Integer(), nullable=False),
        sa.Column("total_sales", money, nullable=False),
        sa.Column("total_rounding", money, nullable=True),
        sa.Column("total_cash", money, nullable=True),
        sa.Column("total_cheques", money, nullable=True),
        sa.Column("total_eftpos", money, nullable=True),
        sa.Column("total_account_sales", money, nullable=False, server_default=sa.text("0")),
        sa.Column("total_payout_instants", money, nullable=True),
        sa.Column("total_payout_lotto", money, nullable=True),
        sa.Column("total_gst", money, nullable=False, server_default=sa.text("0")),
    )


def downgrade() -> None:
    op.drop_table("combined_till_totals")
    op.drop_table("department_sales")
    op.drop_table("departments")
    op.drop_index("ix_charges_match", table_name="charges")
    op.drop_table("charges")
    op.drop_table("customers")
