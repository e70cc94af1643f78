"""Reconciliation of extracted Day Docket records against the POS ledger.

Sales and credit notes are reconciled as independent batches. Within a
batch each record lands in exactly one bucket:

- ``skipped``: no usable customer id (internal store transaction, never
  invoiced and never counted as a failure);
- ``verified``: exact ledger match on (date, amount to the cent, customer id,
  sequence number);
- ``unverified``: no match.

Any unverified record in either batch fails the whole run; callers invoke
:meth:`ReconciliationReport.raise_for_unverified` before transforming.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum

from .amounts import money
from .errors import UnverifiedTransactionError
from .ledger import LedgerQuery
from .logging_setup import get_logger, log_banner
from .models import ExtractionResult, RawTransactionRecord, ReconciledRecord, UnverifiedRecord

_LOGGER = get_logger("day_docket.reconcile")


class BatchKind(StrEnum):
    SALES = "sales"
    CREDITS = "credits"


@dataclass(slots=True)
class ReconciledBatch:
    kind: BatchKind
    verified: list[ReconciledRecord] = field(default_factory=list)
    unverified: list[UnverifiedRecord] = field(default_factory=list)
    skipped: list[RawTransactionRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.unverified

    def counts(self) -> dict[str, int]:
        return {
            "verified": len(self.verified),
            "unverified": len(self.unverified),
            "skipped": len(self.skipped),
        }


@dataclass(slots=True)
class ReconciliationReport:
    sales: ReconciledBatch
    credits: ReconciledBatch

    @property
    def ok(self) -> bool:
        return self.sales.ok and self.credits.ok

    @property
    def verified(self) -> list[ReconciledRecord]:
        return [*self.sales.verified, *self.credits.verified]

    def summary(self) -> dict[str, dict[str, int]]:
        return {
            BatchKind.SALES.value: self.sales.counts(),
            BatchKind.CREDITS.value: self.credits.counts(),
        }

    def raise_for_unverified(self) -> None:
        if self.ok:
            return
        raise UnverifiedTransactionError(
            sales=self.sales.unverified, credits=self.credits.unverified
        )


def reconcile_batch(
    records: Iterable[RawTransactionRecord],
    ledger: LedgerQuery,
    kind: BatchKind,
) -> ReconciledBatch:
    batch = ReconciledBatch(kind=kind)
    for record in records:
        if not record.customer_id:
            batch.skipped.append(record)
            continue
        match = ledger.find_transaction(
            record.date, money(record.amount), record.customer_id, record.seq_no
        )
        if match is None:
            batch.unverified.append(record)
            continue
        batch.verified.append(ReconciledRecord(record=record, ledger=match))
    _LOGGER.info(
        "Reconciled %s: %d verified, %d unverified, %d skipped",
        kind.value,
        len(batch.verified),
        len(batch.unverified),
        len(batch.skipped),
    )
    return batch


def reconcile(results: Iterable[ExtractionResult], ledger: LedgerQuery) -> ReconciliationReport:
    """Reconcile the sales and credits of every extraction result."""

    results = list(results)
    report = ReconciliationReport(
        sales=reconcile_batch(
            (r for res in results for r in res.sales), ledger, BatchKind.SALES
        ),
        credits=reconcile_batch(
            (r for res in results for r in res.credits), ledger, BatchKind.CREDITS
        ),
    )
    if not report.ok:
        _log_unverified(report)
    return report


def _log_unverified(report: ReconciliationReport) -> None:
    for label, batch in (("Charge", report.sales), ("Credit note", report.credits)):
        if not batch.unverified:
            continue
        log_banner(
            _LOGGER,
            f"The following {batch.kind.value} records require corrections prior to importing:",
            (f"{label} not matched in ledger: {r.describe()}" for r in batch.unverified),
        )


__all__ = [
    "BatchKind",
    "ReconciledBatch",
    "ReconciliationReport",
    "reconcile_batch",
    "reconcile",
]
