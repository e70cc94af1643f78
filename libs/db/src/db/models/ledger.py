from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


# SQLite only autoincrements INTEGER PRIMARY KEY (rowid alias) columns.
_BigIntPk = BigInteger().with_variant(Integer, "sqlite")


# ---------------------------
# Reference: customers
# ---------------------------


class Customer(Base):
    __tablename__ = "customers"

    # POS account number as printed on the Day Docket (e.g. "10528").
    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Contact identifier in the external accounting system.
    xero_id: Mapped[str | None] = mapped_column(String, nullable=True)
    # Raw trading-terms code as stored by the accounting system; NULL means the
    # customer has no terms on file and the default policy applies.
    terms_type: Mapped[str | None] = mapped_column(String, nullable=True)
    terms_days: Mapped[int | None] = mapped_column(Integer, nullable=True)

    charges: Mapped[list[Charge]] = relationship(back_populates="customer")

    __table_args__ = (
        CheckConstraint(
            "terms_days IS NULL OR terms_days >= 0",
            name="ck_customers_terms_days",
        ),
    )


# ---------------------------
# Core: charges
# ---------------------------


class Charge(Base):
    __tablename__ = "charges"

    id: Mapped[int] = mapped_column(_BigIntPk, primary_key=True, autoincrement=True)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    customer_id: Mapped[str] = mapped_column(
        String, ForeignKey("customers.id"), nullable=False
    )
    # Zero-padded four character POS sequence number.
    seq_no: Mapped[str] = mapped_column(String(4), nullable=False)
    terminal_id: Mapped[str | None] = mapped_column(String, nullable=True)
    # Stored in UTC; rendered in the organisation's timezone for descriptions.
    tran_timestamp: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    # POS transaction type. 13 = in-store use, 14 = other payment.
    tran_type: Mapped[int | None] = mapped_column(Integer, nullable=True)

    customer: Mapped[Customer] = relationship(back_populates="charges")

    __table_args__ = (
        Index("ix_charges_match", "date", "customer_id", "seq_no"),
    )


# ---------------------------
# Daily totals (aggregate DD invoice)
# ---------------------------


class Department(Base):
    __tablename__ = "departments"

    dept_code: Mapped[str] = mapped_column(String, primary_key=True)
    dept_display_name: Mapped[str] = mapped_column(Text, nullable=False)
    gl_code_sales: Mapped[str | None] = mapped_column(String, nullable=True)
    gl_code_purchases: Mapped[str | None] = mapped_column(String, nullable=True)


class DepartmentSales(Base):
    __tablename__ = "department_sales"

    id: Mapped[int] = mapped_column(_BigIntPk, primary_key=True, autoincrement=True)
    date: Mapped[date] = mapped_column(Date, nullable=False)
    dept_code: Mapped[str] = mapped_column(
        String, ForeignKey("departments.dept_code"), nullable=False
    )
    sell_ex: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, server_default=text("0")
    )

    department: Mapped[Department] = relationship()


class CombinedTillTotal(Base):
    __tablename__ = "combined_till_totals"

    date: Mapped[date] = mapped_column(Date, primary_key=True)
    customer_count: Mapped[int] = mapped_column(Integer, nullable=False)
    total_sales: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    total_rounding: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    total_cash: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    total_cheques: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    total_eftpos: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    total_account_sales: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, server_default=text("0")
    )
    total_payout_instants: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    total_payout_lotto: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    total_gst: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, server_default=text("0")
    )


__all__ = [
    "Base",
    "Customer",
    "Charge",
    "Department",
    "DepartmentSales",
    "CombinedTillTotal",
]
