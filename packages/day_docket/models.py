"""Data models for the Day Docket import pipeline.

Records flowing through parse → reconcile are frozen ``dataclass`` values.
The terminal artifacts handed to the submission layer (invoice and credit
note drafts) are pydantic models so they serialise to JSON with the
accounting API's camelCase field names.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .amounts import ZERO
from .balance import is_balanced

# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RawTransactionRecord:
    """One qualifying row from the summary worksheet.

    ``customer_id`` is ``None`` when the row carries no usable customer (an
    internal store transaction); such records are never reconciled.
    """

    date: date
    amount: Decimal
    customer_id: str | None
    seq_no: str | None
    notes: str | None = None

    def describe(self) -> str:
        return (
            f"date={self.date.isoformat()} amount={self.amount:.2f} "
            f"customer={self.customer_id or '-'} seq={self.seq_no or '-'} "
            f"notes={self.notes or '-'}"
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "amount": f"{self.amount:.2f}",
            "customerId": self.customer_id,
            "seqNo": self.seq_no,
            "notes": self.notes,
        }


# Records that failed ledger matching keep the raw shape untouched.
type UnverifiedRecord = RawTransactionRecord


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Everything read from one Day Docket worksheet."""

    docket_date: date
    sales: tuple[RawTransactionRecord, ...]
    credits: tuple[RawTransactionRecord, ...]
    total_debtors: Decimal
    payments: tuple[RawTransactionRecord, ...] = ()
    till_variance: Decimal = ZERO

    @property
    def is_balanced(self) -> bool:
        return is_balanced(self.sales, self.credits, self.total_debtors)

    def to_json(self) -> dict[str, Any]:
        return {
            "date": self.docket_date.isoformat(),
            "accountSales": [r.to_json() for r in self.sales],
            "accountCR": [r.to_json() for r in self.credits],
            "accountPayments": [r.to_json() for r in self.payments],
            "totalDebtors": f"{self.total_debtors:.2f}",
            "tillVariance": f"{self.till_variance:.2f}",
            "isBalanced": self.is_balanced,
        }


# ---------------------------------------------------------------------------
# Trading terms
# ---------------------------------------------------------------------------


class TermsType(StrEnum):
    """Closed set of trading-terms variants.

    ``DEFAULT`` stands for "no terms on file". ``UNKNOWN`` covers any code the
    ledger holds that this module does not recognise. The remaining values are
    the accounting system's own codes.
    """

    DEFAULT = "DEFAULT"
    DAYS_AFTER_BILL_DATE = "DAYSAFTERBILLDATE"
    DAYS_AFTER_BILL_MONTH = "DAYSAFTERBILLMONTH"
    OF_CURRENT_MONTH = "OFCURRENTMONTH"
    OF_FOLLOWING_MONTH = "OFFOLLOWINGMONTH"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True, slots=True)
class TradingTerms:
    type: TermsType = TermsType.DEFAULT
    days: int = 0
    # The ledger code as stored, kept for UNKNOWN terms so logs can show it.
    raw_code: str | None = None

    def __post_init__(self) -> None:
        if self.days < 0:
            raise ValueError(f"terms days must be non-negative, got {self.days}")

    @classmethod
    def from_ledger(cls, terms_type: str | None, terms_days: int | None) -> TradingTerms:
        if terms_type is None or not str(terms_type).strip():
            return cls()
        code = str(terms_type).strip().upper()
        try:
            kind = TermsType(code)
        except ValueError:
            kind = TermsType.UNKNOWN
        if kind in (TermsType.DEFAULT, TermsType.UNKNOWN):
            # Neither is a code the ledger may legitimately store.
            kind = TermsType.UNKNOWN
        return cls(type=kind, days=int(terms_days or 0), raw_code=code)


DEFAULT_TERMS = TradingTerms()


# ---------------------------------------------------------------------------
# Ledger and reconciliation
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LedgerTransaction:
    """Authoritative POS charge joined with its customer's account details."""

    id: int
    date: date
    amount: Decimal
    customer_id: str
    seq_no: str
    terminal_id: str | None
    tran_timestamp: datetime | None
    contact_id: str | None
    terms: TradingTerms = DEFAULT_TERMS


@dataclass(frozen=True, slots=True)
class ReconciledRecord:
    """A spreadsheet record confirmed against the ledger."""

    record: RawTransactionRecord
    ledger: LedgerTransaction

    @property
    def date(self) -> date:
        return self.ledger.date

    @property
    def amount(self) -> Decimal:
        return self.ledger.amount

    @property
    def notes(self) -> str | None:
        # The ledger has no free-text notes; they only exist on the sheet.
        return self.record.notes

    @property
    def reference(self) -> str:
        return f"{self.ledger.terminal_id}/{self.ledger.seq_no}"

    @property
    def is_credit(self) -> bool:
        return self.amount < 0


# ---------------------------------------------------------------------------
# Daily aggregate figures (DD invoice)
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DepartmentSale:
    display_name: str
    sell_ex: Decimal
    account_code: str | None = None


@dataclass(frozen=True, slots=True)
class StoreExpense:
    """In-store-use transaction charged to the walk-in account."""

    amount: Decimal
    seq_no: str
    terminal_id: str | None
    tran_timestamp: datetime | None


@dataclass(frozen=True, slots=True)
class DailyTotals:
    date: date
    customer_count: int
    total_sales: Decimal
    total_gst: Decimal
    total_account_sales: Decimal
    total_rounding: Decimal = ZERO
    department_sales: tuple[DepartmentSale, ...] = ()
    store_expenses: tuple[StoreExpense, ...] = ()
    # Recorded as negative amounts in the ledger.
    total_other_payments: Decimal = ZERO

    @property
    def total_store_expenses(self) -> Decimal:
        return sum((e.amount for e in self.store_expenses), ZERO)


# ---------------------------------------------------------------------------
# Output drafts
# ---------------------------------------------------------------------------


class _Draft(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class InvoiceLineItem(_Draft):
    description: str
    quantity: int = 1
    unit_amount: Decimal
    tax_amount: Decimal = ZERO
    account_code: str
    tax_type: str


class _DraftDocument(_Draft):
    contact_id: str | None
    date: dt.date
    due_date: dt.date
    reference: str
    status: Literal["SUBMITTED"] = "SUBMITTED"
    line_amount_types: Literal["Inclusive"] = "Inclusive"
    line_items: tuple[InvoiceLineItem, ...]


class InvoiceDraft(_DraftDocument):
    type: Literal["ACCREC"] = "ACCREC"


class CreditNoteDraft(_DraftDocument):
    type: Literal["ACCRECCREDIT"] = "ACCRECCREDIT"


@dataclass(slots=True)
class DraftSet:
    """Invoices and credit notes ready for the submission layer."""

    invoices: list[InvoiceDraft] = field(default_factory=list)
    credit_notes: list[CreditNoteDraft] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.invoices) + len(self.credit_notes)

    def to_payload(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "invoices": [d.model_dump(mode="json", by_alias=True) for d in self.invoices],
            "creditNotes": [
                d.model_dump(mode="json", by_alias=True) for d in self.credit_notes
            ],
        }


__all__ = [
    "RawTransactionRecord",
    "UnverifiedRecord",
    "ExtractionResult",
    "TermsType",
    "TradingTerms",
    "DEFAULT_TERMS",
    "LedgerTransaction",
    "ReconciledRecord",
    "DepartmentSale",
    "StoreExpense",
    "DailyTotals",
    "InvoiceLineItem",
    "InvoiceDraft",
    "CreditNoteDraft",
    "DraftSet",
]
