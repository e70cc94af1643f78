# ruff: noqa: E402, I001
from __future__ import annotations

import json
import sys
from datetime import date, datetime
from pathlib import Path

import pytest

# Make sure the workspace `packages/` dir is on sys.path so `day_docket` is importable
_ROOT = Path(__file__).resolve().parents[2]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR), str(_ROOT)] if p not in sys.path]

from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402
from sqlalchemy import create_engine, inspect  # noqa: E402
from typer.testing import CliRunner  # noqa: E402

from db.client import session_scope  # noqa: E402
from day_docket.cli import app  # noqa: E402

from tests.helpers.db import add_charge, add_customer  # noqa: E402
from tests.helpers.sheets import sample_cells, write_docket  # noqa: E402

_ALEMBIC_DIR = _ROOT / "libs" / "db" / "alembic"


def _migrate(url: str, monkeypatch: pytest.MonkeyPatch) -> None:
    """Apply the migrations to ``url`` (no ini file, so logging is left alone)."""

    monkeypatch.setenv("DATABASE_URL", url)
    cfg = Config()
    cfg.set_main_option("script_location", str(_ALEMBIC_DIR))
    command.upgrade(cfg, "head")


def test_migrated_ledger_supports_full_import(tmp_path: Path, monkeypatch) -> None:
    url = f"sqlite+pysqlite:///{tmp_path / 'ledger.db'}"
    _migrate(url, monkeypatch)

    engine = create_engine(url)
    tables = set(inspect(engine).get_table_names())
    engine.dispose()
    assert {
        "customers",
        "charges",
        "departments",
        "department_sales",
        "combined_till_totals",
    } <= tables

    day = date(2023, 1, 15)
    with session_scope(database_url=url) as s:
        add_customer(s, "20001", xero_id="c-20001", terms_type="OFFOLLOWINGMONTH", terms_days=5)
        add_customer(s, "20002", xero_id="c-20002")
        add_customer(s, "10528", xero_id="c-walk-in")
        add_customer(s, "45678", xero_id="c-special")
        add_charge(
            s,
            day=day,
            amount="120.50",
            customer_id="20001",
            seq_no="0042",
            terminal_id="1",
            tran_timestamp=datetime(2023, 1, 14, 23, 59, 0),
        )
        add_charge(s, day=day, amount="-15.25", customer_id="20002", seq_no="0077")
        add_charge(s, day=day, amount="33.10", customer_id="10528", seq_no="0105")
        add_charge(s, day=day, amount="64.00", customer_id="45678", seq_no="0110")

    # Extra sale for the special account; Total Debtors moves with it.
    cells = sample_cells(C27=64.0, D27="45678", E27=110, G35=202.35)
    write_docket(tmp_path / "in" / "wk3" / "DD 15.xlsx", cells)
    out = tmp_path / "out" / "drafts.json"

    result = CliRunner().invoke(
        app,
        [
            "build",
            "--input-dir",
            str(tmp_path / "in"),
            "--out",
            str(out),
            "--no-daily-invoice",
        ],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(out.read_text())
    invoices = {i["reference"]: i for i in payload["invoices"]}
    assert set(invoices) == {"1/0042", "3/0105", "3/0110"}

    smith = invoices["1/0042"]
    assert smith["contactId"] == "c-20001"
    assert smith["dueDate"] == "2023-02-05"
    assert smith["lineItems"][0]["description"].startswith("Smith groceries: \n* POS ID: 1/0042")
    assert "* Timestamp: 15/01/2023, 09:59:00" in smith["lineItems"][0]["description"]

    assert invoices["3/0110"]["lineItems"][0]["accountCode"] == "42010"
    assert invoices["3/0105"]["lineItems"][0]["accountCode"] == "41010"
    (credit,) = payload["creditNotes"]
    assert credit["contactId"] == "c-20002"
    assert credit["lineItems"][0]["unitAmount"] == "15.25"
    assert payload["balanceWarnings"] == []
