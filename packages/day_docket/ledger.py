# ruff: noqa: I001
"""Read-only access to the POS ledger owned by ``libs/db``.

The reconciler depends only on the :class:`LedgerQuery` protocol; the
SQLAlchemy-backed :class:`SqlLedger` is the production implementation and
tests may pass any object with a matching ``find_transaction``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from db.models.ledger import Charge, CombinedTillTotal, Customer, DepartmentSales
from .amounts import ZERO, money
from .models import (
    DailyTotals,
    DepartmentSale,
    LedgerTransaction,
    StoreExpense,
    TradingTerms,
)

# POS transaction types recorded against the walk-in account.
TRAN_TYPE_STORE_USE = 13
TRAN_TYPE_OTHER_PAYMENT = 14


class LedgerQuery(Protocol):
    def find_transaction(
        self,
        date: date,
        amount: Decimal,
        customer_id: str,
        seq_no: str | None,
    ) -> LedgerTransaction | None: ...


def _to_ledger_transaction(charge: Charge) -> LedgerTransaction:
    customer: Customer | None = charge.customer
    return LedgerTransaction(
        id=charge.id,
        date=charge.date,
        amount=money(charge.amount),
        customer_id=charge.customer_id,
        seq_no=charge.seq_no,
        terminal_id=charge.terminal_id,
        tran_timestamp=charge.tran_timestamp,
        contact_id=customer.xero_id if customer is not None else None,
        terms=(
            TradingTerms.from_ledger(customer.terms_type, customer.terms_days)
            if customer is not None
            else TradingTerms()
        ),
    )


class SqlLedger:
    """:class:`LedgerQuery` over the ``charges``/``customers`` tables."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_transaction(
        self,
        date: date,
        amount: Decimal,
        customer_id: str,
        seq_no: str | None,
    ) -> LedgerTransaction | None:
        stmt = (
            select(Charge)
            .options(joinedload(Charge.customer))
            .where(
                Charge.date == date,
                Charge.amount == money(amount),
                Charge.customer_id == customer_id,
                Charge.seq_no == seq_no,
            )
            .order_by(Charge.id)
            .limit(1)
        )
        charge = self._session.execute(stmt).scalars().first()
        if charge is None:
            return None
        return _to_ledger_transaction(charge)

    def fetch_daily_totals(self, day: date, *, walk_in_customer_id: str) -> DailyTotals:
        """Aggregate figures for the day's DD invoice.

        Raises ``LookupError`` when the till totals for ``day`` are missing.
        """

        till = self._session.get(CombinedTillTotal, day)
        if till is None:
            raise LookupError(f"No combined till totals recorded for {day.isoformat()}")

        dept_rows = (
            self._session.execute(
                select(DepartmentSales)
                .options(joinedload(DepartmentSales.department))
                .where(DepartmentSales.date == day)
            )
            .scalars()
            .all()
        )
        store_rows = (
            self._session.execute(
                select(Charge)
                .where(
                    Charge.date == day,
                    Charge.customer_id == walk_in_customer_id,
                    Charge.tran_type == TRAN_TYPE_STORE_USE,
                )
                .order_by(Charge.id)
            )
            .scalars()
            .all()
        )
        other_payments = self._session.execute(
            select(func.coalesce(func.sum(Charge.amount), 0)).where(
                Charge.date == day,
                Charge.customer_id == walk_in_customer_id,
                Charge.tran_type == TRAN_TYPE_OTHER_PAYMENT,
            )
        ).scalar_one()

        return DailyTotals(
            date=till.date,
            customer_count=till.customer_count,
            total_sales=money(till.total_sales),
            total_gst=money(till.total_gst),
            total_account_sales=money(till.total_account_sales),
            total_rounding=money(till.total_rounding) if till.total_rounding is not None else ZERO,
            department_sales=tuple(
                DepartmentSale(
                    display_name=row.department.dept_display_name,
                    sell_ex=money(row.sell_ex),
                    account_code=row.department.gl_code_sales,
                )
                for row in dept_rows
            ),
            store_expenses=tuple(
                StoreExpense(
                    amount=money(row.amount),
                    seq_no=row.seq_no,
                    terminal_id=row.terminal_id,
                    tran_timestamp=row.tran_timestamp,
                )
                for row in store_rows
            ),
            total_other_payments=money(other_payments),
        )


__all__ = [
    "LedgerQuery",
    "SqlLedger",
    "TRAN_TYPE_STORE_USE",
    "TRAN_TYPE_OTHER_PAYMENT",
]
