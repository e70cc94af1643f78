# ruff: noqa: I001
"""CLI for the ``day_docket`` package.

Command handlers (``cmd_extract``, ``cmd_build``) return process exit codes
and are wrapped by a Typer console interface. Environment variables
(``DATABASE_URL`` and the ``DAY_DOCKET_*`` settings) are loaded from a local
``.env`` with ``python-dotenv`` before delegating. Submitting drafts to the
accounting system is handled elsewhere; ``build`` only writes the payload.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError
from typer.models import OptionInfo

from db.client import session_scope
from .errors import DayDocketError
from .ingest.files import discover_docket_files
from .ingest.grid import InvalidFileException
from .ledger import SqlLedger
from .logging_setup import configure_logging, get_logger
from .pipeline import build_drafts, extract_files
from .settings import ImportSettings

_LOGGER = get_logger("day_docket.cli")

# Failures while locating or reading docket files.
_INPUT_ERRORS = (DayDocketError, OSError, InvalidFileException, ValueError)


def _resolve_input_dir(input_dir: Path | None, settings: ImportSettings) -> Path:
    resolved = input_dir or settings.input_path
    if resolved is None:
        raise DayDocketError("No input directory: pass --input-dir or set DAY_DOCKET_INPUT_PATH")
    return resolved


def _emit(payload: Any, out: Path | None) -> None:
    text = json.dumps(payload, indent=2)
    if out is None:
        print(text)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text + "\n", encoding="utf-8")
    _LOGGER.info("Wrote %s", out)


def cmd_extract(input_dir: Path | None, *, entity: str | None = None, out: Path | None = None) -> int:
    """Parse every docket file and print the extraction JSON."""

    try:
        settings = ImportSettings.from_env(entity=entity)
        files = discover_docket_files(_resolve_input_dir(input_dir, settings))
        results = extract_files(files, settings)
    except _INPUT_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _emit([r.to_json() for r in results], out)
    return 0


def cmd_build(
    input_dir: Path | None,
    *,
    entity: str | None = None,
    database_url: str | None = None,
    out: Path | None = None,
    daily_invoice: bool = True,
) -> int:
    """Run the full pipeline and write the invoice/credit-note payload."""

    try:
        settings = ImportSettings.from_env(entity=entity)
        files = discover_docket_files(_resolve_input_dir(input_dir, settings))
        results = extract_files(files, settings)
    except _INPUT_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        with session_scope(database_url=database_url) as session:
            ledger = SqlLedger(session)
            daily = (
                [
                    ledger.fetch_daily_totals(
                        r.docket_date, walk_in_customer_id=settings.walk_in_customer_id
                    )
                    for r in results
                ]
                if daily_invoice
                else []
            )
            run = build_drafts(results, ledger, settings, daily_totals=daily)
    except DayDocketError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except LookupError as e:
        print(f"Error: ledger data missing: {e}", file=sys.stderr)
        return 1
    except SQLAlchemyError as e:
        print(f"Error: ledger database: {e}", file=sys.stderr)
        return 1

    payload = run.drafts.to_payload()
    payload["reconciliation"] = run.report.summary()
    payload["balanceWarnings"] = [str(w) for w in run.balance_warnings]
    _emit(payload, out)
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Import Day Docket workbooks: extract account charges, reconcile them "
        "against the POS ledger and build invoice/credit-note drafts."
    ),
)

# Module-level option objects to satisfy ruff B008 (no calls in parameter
# defaults).
INPUT_DIR_OPTION: OptionInfo = typer.Option(
    ...,
    "--input-dir",
    help="Directory holding 'DD NN.xlsx' files (falls back to DAY_DOCKET_INPUT_PATH).",
    file_okay=False,
    dir_okay=True,
)
OUT_OPTION: OptionInfo = typer.Option(
    ..., "--out", help="Write JSON here instead of stdout.", dir_okay=False
)
ENTITY_OPTION: OptionInfo = typer.Option(
    ..., "--entity", help="Store code (pw or wb); falls back to DAY_DOCKET_ENTITY."
)


@app.command("extract")
def extract_cmd(
    input_dir: Annotated[Path | None, INPUT_DIR_OPTION] = None,
    *,
    entity: Annotated[str | None, ENTITY_OPTION] = None,
    out: Annotated[Path | None, OUT_OPTION] = None,
) -> None:
    """Print the parsed charges, credits and payments of every docket."""

    raise typer.Exit(cmd_extract(input_dir, entity=entity, out=out))


@app.command("build")
def build_cmd(
    input_dir: Annotated[Path | None, INPUT_DIR_OPTION] = None,
    *,
    entity: Annotated[str | None, ENTITY_OPTION] = None,
    out: Annotated[Path | None, OUT_OPTION] = None,
    database_url: str | None = typer.Option(
        None, help="Override DATABASE_URL (falls back to env var)."
    ),
    daily_invoice: bool = typer.Option(
        True, help="Include the aggregate DD invoice for each docket date."
    ),
) -> None:
    """Reconcile against the ledger and write the draft payload."""

    raise typer.Exit(
        cmd_build(
            input_dir,
            entity=entity,
            database_url=database_url,
            out=out,
            daily_invoice=daily_invoice,
        )
    )


@app.callback()
def _root() -> None:
    """Load ``.env`` (without overriding set variables) and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


if __name__ == "__main__":  # pragma: no cover
    app()
