"""Error types raised by the Day Docket import pipeline.

``LayoutError`` and ``UnverifiedTransactionError`` are fatal for a run: the
pipeline raises them before any invoice drafts are produced. Balance
mismatches are advisory and modelled as :class:`BalanceMismatch` values
returned to the caller rather than raised.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .models import RawTransactionRecord


class DayDocketError(Exception):
    """Base class for fatal import errors."""


class LayoutError(DayDocketError):
    """The workbook does not have the expected tab, anchor cell or sentinels."""


class ConfigurationError(DayDocketError):
    """A setting the requested operation needs is missing or invalid."""


class UnverifiedTransactionError(DayDocketError):
    """One or more extracted records have no matching ledger transaction.

    The whole run is aborted so nothing is posted until the source data is
    corrected; the message lists every offending record.
    """

    def __init__(
        self,
        *,
        sales: Sequence[RawTransactionRecord] = (),
        credits: Sequence[RawTransactionRecord] = (),
    ) -> None:
        self.sales = tuple(sales)
        self.credits = tuple(credits)
        lines = [
            "Nothing imported: "
            f"{len(self.sales)} charge(s) and {len(self.credits)} credit note(s) "
            "were not matched in the ledger. Correct them and re-run."
        ]
        lines.extend(f"  charge not matched: {r.describe()}" for r in self.sales)
        lines.extend(f"  credit note not matched: {r.describe()}" for r in self.credits)
        super().__init__("\n".join(lines))

    @property
    def records(self) -> tuple[RawTransactionRecord, ...]:
        return self.sales + self.credits


@dataclass(frozen=True, slots=True)
class BalanceMismatch:
    """Advisory artifact: extracted totals disagree with the sheet's Total Debtors."""

    docket_date: date
    total_debtors: Decimal
    extracted_total: Decimal

    @property
    def difference(self) -> Decimal:
        return self.extracted_total - self.total_debtors

    def __str__(self) -> str:
        return (
            f"{self.docket_date.isoformat()}: charges & credits total "
            f"{self.extracted_total:.2f} but Total Debtors is {self.total_debtors:.2f} "
            f"(difference {self.difference:.2f})"
        )


__all__ = [
    "DayDocketError",
    "LayoutError",
    "ConfigurationError",
    "UnverifiedTransactionError",
    "BalanceMismatch",
]
