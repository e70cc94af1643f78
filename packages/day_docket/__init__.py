"""Public interface for the ``day_docket`` package.

Re-exports the pipeline stages (extract, balance, reconcile, due dates,
transform) and the public models as the stable import surface.
"""

from .balance import check_balance, is_balanced
from .due_dates import due_date
from .errors import (
    BalanceMismatch,
    ConfigurationError,
    DayDocketError,
    LayoutError,
    UnverifiedTransactionError,
)
from .ingest import discover_docket_files, extract_summary, read_docket
from .models import (
    CreditNoteDraft,
    DailyTotals,
    DraftSet,
    ExtractionResult,
    InvoiceDraft,
    InvoiceLineItem,
    LedgerTransaction,
    RawTransactionRecord,
    ReconciledRecord,
    TermsType,
    TradingTerms,
)
from .pipeline import ImportRun, build_drafts, extract_files
from .reconcile import ReconciliationReport, reconcile, reconcile_batch
from .settings import ImportSettings
from .transform import build_daily_invoice, to_draft, transform_records

__all__ = [
    # Pipeline
    "extract_summary",
    "read_docket",
    "discover_docket_files",
    "extract_files",
    "is_balanced",
    "check_balance",
    "reconcile",
    "reconcile_batch",
    "due_date",
    "to_draft",
    "transform_records",
    "build_daily_invoice",
    "build_drafts",
    "ImportRun",
    "ImportSettings",
    # Models / types
    "RawTransactionRecord",
    "ExtractionResult",
    "LedgerTransaction",
    "ReconciledRecord",
    "ReconciliationReport",
    "TermsType",
    "TradingTerms",
    "InvoiceLineItem",
    "InvoiceDraft",
    "CreditNoteDraft",
    "DraftSet",
    "DailyTotals",
    # Errors
    "DayDocketError",
    "LayoutError",
    "ConfigurationError",
    "UnverifiedTransactionError",
    "BalanceMismatch",
]
