"""Orchestration: parse → verify balances → reconcile → transform.

Files are processed one after another; each yields its own immutable
:class:`ExtractionResult`. Reconciliation needs the complete parsed set
before anything is transformed, because a single unverified record aborts
the run with no drafts at all.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from os import PathLike

from .balance import check_balance
from .errors import BalanceMismatch
from .ingest.summary import read_docket
from .ledger import LedgerQuery
from .logging_setup import get_logger, log_banner
from .models import DailyTotals, DraftSet, ExtractionResult
from .reconcile import ReconciliationReport, reconcile
from .settings import ImportSettings
from .transform import build_daily_invoice, transform_records

_LOGGER = get_logger("day_docket.pipeline")


@dataclass(slots=True)
class ImportRun:
    results: list[ExtractionResult]
    report: ReconciliationReport
    drafts: DraftSet
    balance_warnings: list[BalanceMismatch] = field(default_factory=list)


def extract_files(
    paths: Iterable[str | PathLike[str]], settings: ImportSettings
) -> list[ExtractionResult]:
    results: list[ExtractionResult] = []
    for path in paths:
        _LOGGER.debug("Reading %s", path)
        results.append(read_docket(path, settings))
    return results


def verify_balances(results: Iterable[ExtractionResult]) -> list[BalanceMismatch]:
    mismatches = [m for m in (check_balance(r) for r in results) if m is not None]
    if mismatches:
        log_banner(
            _LOGGER,
            "Charges & credits to import DO NOT reconcile with Total Debtors. "
            "Manually review the drafts before approving them.",
            (str(m) for m in mismatches),
        )
    return mismatches


def build_drafts(
    results: Sequence[ExtractionResult],
    ledger: LedgerQuery,
    settings: ImportSettings,
    *,
    daily_totals: Iterable[DailyTotals] = (),
) -> ImportRun:
    """Reconcile ``results`` and build every draft for the run.

    Raises :class:`~day_docket.errors.UnverifiedTransactionError` before any
    draft is created when a record fails to match the ledger.
    """

    warnings = verify_balances(results)
    report = reconcile(results, ledger)
    _LOGGER.info("Reconciliation summary: %s", report.summary())
    report.raise_for_unverified()

    drafts = DraftSet()
    for totals in daily_totals:
        drafts.invoices.append(build_daily_invoice(totals, settings))
    transform_records(report.sales.verified, settings, into=drafts)
    transform_records(report.credits.verified, settings, into=drafts)
    _LOGGER.info(
        "Built %d invoice(s) and %d credit note(s)",
        len(drafts.invoices),
        len(drafts.credit_notes),
    )
    return ImportRun(
        results=list(results), report=report, drafts=drafts, balance_warnings=warnings
    )


__all__ = ["ImportRun", "extract_files", "verify_balances", "build_drafts"]
