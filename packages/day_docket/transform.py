"""Reconciled records → invoice and credit-note drafts.

Per-transaction path
--------------------
Each verified record becomes one draft with exactly one line item:

- negative amount → :class:`CreditNoteDraft`, otherwise :class:`InvoiceDraft`;
- ``unit_amount`` is ``abs(amount)``; tax is zero with the exempt tax type
  (POS account sales are already tax inclusive);
- the special customer posts to the alternate revenue account in both
  directions, everyone else to the default account;
- reference ``{terminal}/{seq}``; due date from the customer's terms.

Daily aggregate path
--------------------
:func:`build_daily_invoice` turns the day's till totals into the "DD" invoice
with taxable/non-taxable tape sales, department sales, POS rounding and the
in-store-use expense lines.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta
from decimal import Decimal

from .amounts import ZERO, money
from .due_dates import due_date, to_local
from .errors import ConfigurationError
from .logging_setup import get_logger
from .models import (
    CreditNoteDraft,
    DailyTotals,
    DraftSet,
    InvoiceDraft,
    InvoiceLineItem,
    ReconciledRecord,
)
from .settings import ImportSettings

_LOGGER = get_logger("day_docket.transform")

DEFAULT_DESCRIPTION = "Customer POS Account Sale"

# Departments broken out on the DD invoice, in line-item order.
REPORTED_DEPARTMENTS: tuple[str, ...] = (
    "Fruit & Veg",
    "Deli",
    "Bakery",
    "Meat",
    "Take-away",
    "Cigarettes & Tobacco",
    "Scratchies",
    "Lotto",
    "Homeware",
)

GST_MULTIPLIER = Decimal("11")
DAILY_INVOICE_DUE_DAYS = 2


def format_timestamp(ts: datetime | None, tz_offset_hours: float) -> str:
    if ts is None:
        return "n/a"
    return to_local(ts, tz_offset_hours).strftime("%d/%m/%Y, %H:%M:%S")


def account_code_for(customer_id: str | None, settings: ImportSettings) -> str:
    if customer_id == settings.special_customer_id:
        return settings.special_account_code
    return settings.default_account_code


def describe(record: ReconciledRecord, settings: ImportSettings) -> str:
    stamp = format_timestamp(record.ledger.tran_timestamp, settings.tz_offset_hours)
    return (
        f"{record.notes or DEFAULT_DESCRIPTION}: \n"
        f"* POS ID: {record.reference}\n"
        f"* Timestamp: {stamp}\n"
        f"* TransactionID: {record.ledger.id}"
    )


def to_draft(
    record: ReconciledRecord, settings: ImportSettings
) -> InvoiceDraft | CreditNoteDraft:
    line = InvoiceLineItem(
        description=describe(record, settings),
        quantity=1,
        unit_amount=abs(money(record.amount)),
        tax_amount=ZERO,
        account_code=account_code_for(record.ledger.customer_id, settings),
        tax_type=settings.exempt_tax_type,
    )
    draft_cls = CreditNoteDraft if record.is_credit else InvoiceDraft
    return draft_cls(
        contact_id=record.ledger.contact_id,
        date=record.date,
        due_date=due_date(
            record.date, record.ledger.terms, tz_offset_hours=settings.tz_offset_hours
        ),
        reference=record.reference,
        line_items=(line,),
    )


def transform_records(
    records: Iterable[ReconciledRecord], settings: ImportSettings, *, into: DraftSet | None = None
) -> DraftSet:
    drafts = into if into is not None else DraftSet()
    for record in records:
        if not record.amount:
            _LOGGER.error("Skipping zero-amount ledger transaction %s", record.ledger.id)
            continue
        draft = to_draft(record, settings)
        if isinstance(draft, CreditNoteDraft):
            drafts.credit_notes.append(draft)
        else:
            drafts.invoices.append(draft)
    return drafts


# ---------------------------------------------------------------------------
# Daily aggregate (DD) invoice
# ---------------------------------------------------------------------------


def daily_reference(totals: DailyTotals) -> str:
    weekday = totals.date.strftime("%a").upper()
    average = (
        money(totals.total_sales / totals.customer_count) if totals.customer_count else ZERO
    )
    return f"DD/{weekday}/{totals.customer_count}/{average:.2f}"


def build_daily_invoice(totals: DailyTotals, settings: ImportSettings) -> InvoiceDraft:
    contact_id = settings.daily_contact_id
    if not contact_id:
        raise ConfigurationError(
            f"No daily docket contact configured for entity {settings.entity!r}"
        )

    by_name = {d.display_name: d for d in totals.department_sales}
    departments = [by_name[name] for name in REPORTED_DEPARTMENTS if name in by_name]

    gst_sales = money(totals.total_gst * GST_MULTIPLIER)
    store_total = money(totals.total_store_expenses)
    # Other payments are stored negative, hence the addition.
    fre_sales = money(
        totals.total_sales
        - sum((d.sell_ex for d in departments), ZERO)
        - gst_sales
        - (totals.total_account_sales - store_total)
        + totals.total_other_payments
    )
    pos_ids = "".join(
        f"{e.terminal_id}/{e.seq_no} - "
        f"{format_timestamp(e.tran_timestamp, settings.tz_offset_hours)}\n"
        for e in totals.store_expenses
    )

    lines = [
        InvoiceLineItem(
            description="Tape Sales Taxable (GST)",
            unit_amount=gst_sales,
            tax_amount=money(totals.total_gst),
            account_code=settings.default_account_code,
            tax_type="OUTPUT",
        ),
        InvoiceLineItem(
            description="Tape Sales Non-Taxable (FRE)",
            unit_amount=fre_sales,
            account_code=settings.default_account_code,
            tax_type=settings.exempt_tax_type,
        ),
        *(
            InvoiceLineItem(
                description=f"{d.display_name} Department Sales",
                unit_amount=money(d.sell_ex),
                account_code=d.account_code or settings.default_account_code,
                tax_type=settings.exempt_tax_type,
            )
            for d in departments
        ),
        InvoiceLineItem(
            description="Rounding from POS",
            unit_amount=ZERO - money(totals.total_rounding),
            account_code=settings.rounding_account_code,
            tax_type="BASEXCLUDED",
        ),
        InvoiceLineItem(
            description=f"In-Store Use Expenses/COGS:\n{pos_ids}",
            unit_amount=ZERO - store_total,
            account_code=settings.store_expense_account_code,
            tax_type="EXEMPTEXPENSES",
        ),
    ]

    return InvoiceDraft(
        contact_id=contact_id,
        date=totals.date,
        due_date=totals.date + timedelta(days=DAILY_INVOICE_DUE_DAYS),
        reference=daily_reference(totals),
        line_items=tuple(lines),
    )


__all__ = [
    "DEFAULT_DESCRIPTION",
    "REPORTED_DEPARTMENTS",
    "format_timestamp",
    "account_code_for",
    "describe",
    "to_draft",
    "transform_records",
    "daily_reference",
    "build_daily_invoice",
]
