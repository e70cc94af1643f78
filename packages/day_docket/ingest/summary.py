"""Extractor for the "A4 Summary" worksheet of a Day Docket export.

Layout contract
---------------
- ``B3`` holds the trading date as a spreadsheet serial day number (or a
  date-formatted cell); ``D15`` holds the till variance.
- From row 21 down, columns ``C``-``F`` hold amount, customer reference,
  sequence number and notes. There is no header row to key on: the literal
  ``"Amount"`` in column ``C`` appears twice, once after the store section
  (which is skipped) and once to close the charges/credits section.
- Two rows below the closing sentinel the internal payments section begins;
  it runs until the customer-reference column reads ``"Total Charges"``.
- ``"Total Debtors"`` may appear anywhere on the sheet; the reported figure is
  in column ``G`` of that row.

Failure mode
------------
A missing anchor, a section that never closes, or a non-numeric amount raises
:class:`~day_docket.errors.LayoutError`. A missing ``"Total Debtors"`` row is
tolerated (reported as zero, logged) so the balance check flags the sheet.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from enum import Enum, auto
from os import PathLike
from typing import Any

from ..amounts import ZERO, money
from ..errors import LayoutError
from ..logging_setup import get_logger
from ..models import ExtractionResult, RawTransactionRecord
from ..settings import ImportSettings
from .grid import CellGrid, open_summary_sheet

_LOGGER = get_logger("day_docket.ingest.summary")

AMOUNT_SENTINEL = "Amount"
TOTAL_CHARGES_SENTINEL = "Total Charges"
TOTAL_DEBTORS_SENTINEL = "Total Debtors"

# Day zero of the spreadsheet serial date system (1900 date system, after
# the fictitious 1900-02-29).
_SERIAL_EPOCH = date(1899, 12, 30)


@dataclass(frozen=True, slots=True)
class SummaryLayout:
    """Cell positions of the summary worksheet."""

    date_cell: tuple[str, int] = ("B", 3)
    till_variance_cell: tuple[str, int] = ("D", 15)
    first_row: int = 21
    amount_col: str = "C"
    customer_col: str = "D"
    seq_col: str = "E"
    notes_col: str = "F"
    total_debtors_col: str = "G"
    # Rows between the closing "Amount" sentinel and the first payment row.
    payments_offset: int = 2


DEFAULT_LAYOUT = SummaryLayout()


class SectionState(Enum):
    SKIP_HEADER = auto()
    ACCUMULATE = auto()
    DONE = auto()


def is_sentinel(value: Any, sentinel: str) -> bool:
    return isinstance(value, str) and value.strip() == sentinel


def next_state(state: SectionState, amount_cell: Any) -> SectionState:
    """Advance the charges/credits scan on one row's amount cell."""

    if not is_sentinel(amount_cell, AMOUNT_SENTINEL):
        return state
    if state is SectionState.SKIP_HEADER:
        return SectionState.ACCUMULATE
    return SectionState.DONE


# ---------------------------------------------------------------------------
# Cell normalisation
# ---------------------------------------------------------------------------


def _cell_text(value: Any) -> str | None:
    """Render an identifier-like cell as text (``12345.0`` → ``"12345"``)."""

    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def pad_seq_no(value: Any) -> str | None:
    text = _cell_text(value)
    if text is None:
        return None
    return text.zfill(4)[-4:]


def normalize_customer_id(
    amount: Decimal | None, reference: Any, *, walk_in_customer_id: str
) -> str | None:
    """Resolve the account a charge belongs to.

    A leading hyphen is the paper convention for a differently coded account
    and is dropped; a charge with no reference belongs to the walk-in account.
    """

    if not amount:
        return None
    ref = _cell_text(reference)
    if ref is None:
        return walk_in_customer_id
    return ref[1:] if ref.startswith("-") else ref


def _amount(grid: CellGrid, column: str, row: int) -> Decimal | None:
    raw = grid.value(column, row)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    try:
        return money(raw)
    except ValueError as exc:
        raise LayoutError(f"{column}{row}: expected an amount, found {raw!r}") from exc


def read_docket_date(grid: CellGrid, layout: SummaryLayout = DEFAULT_LAYOUT) -> date:
    column, row = layout.date_cell
    raw = grid.value(column, row)
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if isinstance(raw, int | float) and not isinstance(raw, bool) and raw > 0:
        return _SERIAL_EPOCH + timedelta(days=int(raw))
    raise LayoutError(f"{column}{row}: expected the docket date, found {raw!r}")


def find_total_debtors(grid: CellGrid, layout: SummaryLayout = DEFAULT_LAYOUT) -> Decimal:
    for _column, row, value in grid.cells():
        if is_sentinel(value, TOTAL_DEBTORS_SENTINEL):
            found = _amount(grid, layout.total_debtors_col, row)
            return found if found is not None else ZERO
    _LOGGER.warning("No %r row on the sheet; reporting total debtors as 0", TOTAL_DEBTORS_SENTINEL)
    return ZERO


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _last_row(grid: CellGrid) -> int:
    return max((row for _c, row, _v in grid.cells()), default=0)


def _scan_charges(
    grid: CellGrid,
    docket_date: date,
    layout: SummaryLayout,
    walk_in_customer_id: str,
) -> tuple[list[RawTransactionRecord], list[RawTransactionRecord], int]:
    """Return sales, credits and the row of the closing sentinel."""

    sales: list[RawTransactionRecord] = []
    credits: list[RawTransactionRecord] = []
    last_row = _last_row(grid)
    state = SectionState.SKIP_HEADER
    row = layout.first_row

    while True:
        if row > last_row:
            raise LayoutError(
                f"Charges section starting at row {layout.first_row} is not closed by a "
                f"second {AMOUNT_SENTINEL!r} row (state {state.name})"
            )
        amount_cell = grid.value(layout.amount_col, row)
        state = next_state(state, amount_cell)
        if state is SectionState.DONE:
            return sales, credits, row
        if state is SectionState.ACCUMULATE and not is_sentinel(amount_cell, AMOUNT_SENTINEL):
            record = _charge_record(grid, row, docket_date, layout, walk_in_customer_id)
            if record is not None:
                (credits if record.amount < 0 else sales).append(record)
        row += 1


def _charge_record(
    grid: CellGrid,
    row: int,
    docket_date: date,
    layout: SummaryLayout,
    walk_in_customer_id: str,
) -> RawTransactionRecord | None:
    amount = _amount(grid, layout.amount_col, row)
    customer_id = normalize_customer_id(
        amount, grid.value(layout.customer_col, row), walk_in_customer_id=walk_in_customer_id
    )
    seq_no = pad_seq_no(grid.value(layout.seq_col, row))
    notes = _cell_text(grid.value(layout.notes_col, row))

    # Blank rows and zero-value lines carry nothing to invoice.
    if not amount:
        return None
    return RawTransactionRecord(
        date=docket_date,
        amount=amount,
        customer_id=customer_id,
        seq_no=seq_no,
        notes=notes,
    )


def _scan_payments(
    grid: CellGrid, docket_date: date, layout: SummaryLayout, start_row: int
) -> list[RawTransactionRecord]:
    payments: list[RawTransactionRecord] = []
    last_row = _last_row(grid)
    row = start_row
    while True:
        if row > last_row:
            raise LayoutError(
                f"Payments section starting at row {start_row} has no "
                f"{TOTAL_CHARGES_SENTINEL!r} row"
            )
        reference = grid.value(layout.customer_col, row)
        if is_sentinel(reference, TOTAL_CHARGES_SENTINEL):
            return payments
        amount = _amount(grid, layout.amount_col, row)
        customer_id = _cell_text(reference)
        seq_no = pad_seq_no(grid.value(layout.seq_col, row))
        notes = _cell_text(grid.value(layout.notes_col, row))
        row += 1
        if not (amount or customer_id or seq_no or notes):
            continue
        payments.append(
            RawTransactionRecord(
                date=docket_date,
                amount=abs(amount) if amount is not None else ZERO,
                customer_id=customer_id,
                seq_no=seq_no,
                notes=notes,
            )
        )


def extract_summary(
    grid: CellGrid,
    *,
    walk_in_customer_id: str = "10528",
    layout: SummaryLayout = DEFAULT_LAYOUT,
) -> ExtractionResult:
    """Parse one summary worksheet into an :class:`ExtractionResult`."""

    docket_date = read_docket_date(grid, layout)
    sales, credits, closing_row = _scan_charges(grid, docket_date, layout, walk_in_customer_id)
    payments = _scan_payments(grid, docket_date, layout, closing_row + layout.payments_offset)
    column, row = layout.till_variance_cell
    till_variance = _amount(grid, column, row) or ZERO

    result = ExtractionResult(
        docket_date=docket_date,
        sales=tuple(sales),
        credits=tuple(credits),
        payments=tuple(payments),
        total_debtors=find_total_debtors(grid, layout),
        till_variance=till_variance,
    )
    _LOGGER.info(
        "Extracted %s: %d sale(s), %d credit(s), %d payment(s), total debtors %.2f, "
        "till variance %.2f",
        docket_date.isoformat(),
        len(result.sales),
        len(result.credits),
        len(result.payments),
        result.total_debtors,
        result.till_variance,
    )
    return result


def read_docket(
    path: str | PathLike[str],
    settings: ImportSettings,
    *,
    layout: SummaryLayout = DEFAULT_LAYOUT,
) -> ExtractionResult:
    """Open the workbook at ``path`` and extract its summary worksheet."""

    grid = open_summary_sheet(path, settings.sheet_name)
    return extract_summary(
        grid, walk_in_customer_id=settings.walk_in_customer_id, layout=layout
    )


__all__ = [
    "AMOUNT_SENTINEL",
    "TOTAL_CHARGES_SENTINEL",
    "TOTAL_DEBTORS_SENTINEL",
    "SummaryLayout",
    "DEFAULT_LAYOUT",
    "SectionState",
    "next_state",
    "is_sentinel",
    "pad_seq_no",
    "normalize_customer_id",
    "read_docket_date",
    "find_total_debtors",
    "extract_summary",
    "read_docket",
]
