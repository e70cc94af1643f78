"""Balance check: extracted charges and credits against the sheet's Total Debtors.

A mismatch never stops the run. It produces a :class:`BalanceMismatch` the
caller logs so the drafts get a manual review before approval.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal
from typing import TYPE_CHECKING

from .amounts import money, total
from .errors import BalanceMismatch

if TYPE_CHECKING:  # pragma: no cover
    from .models import ExtractionResult, RawTransactionRecord


def is_balanced(
    sales: Iterable[RawTransactionRecord],
    credits: Iterable[RawTransactionRecord],
    total_debtors: Decimal,
) -> bool:
    """True when ``Σ sales + Σ credits`` equals ``total_debtors`` to the cent."""

    extracted = total([*(r.amount for r in sales), *(r.amount for r in credits)])
    return extracted == money(total_debtors)


def check_balance(result: ExtractionResult) -> BalanceMismatch | None:
    if result.is_balanced:
        return None
    extracted = total([*(r.amount for r in result.sales), *(r.amount for r in result.credits)])
    return BalanceMismatch(
        docket_date=result.docket_date,
        total_debtors=money(result.total_debtors),
        extracted_total=extracted,
    )


__all__ = ["is_balanced", "check_balance"]
