# ruff: noqa: I001
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from db.client import session_scope
from day_docket.errors import UnverifiedTransactionError
from day_docket.ingest.grid import MappingGrid
from day_docket.ingest.summary import extract_summary
from day_docket.ledger import SqlLedger, TRAN_TYPE_OTHER_PAYMENT, TRAN_TYPE_STORE_USE
from day_docket.models import RawTransactionRecord, TermsType
from day_docket.reconcile import BatchKind, reconcile, reconcile_batch

from tests.helpers.db import add_charge, add_customer, add_till_totals, seed
from tests.helpers.sheets import SAMPLE_CELLS

DAY = date(2023, 1, 15)


def _seed_sample_ledger(session) -> None:
    add_customer(session, "20001", xero_id="c-20001", terms_type="DAYSAFTERBILLDATE", terms_days=7)
    add_customer(session, "20002", xero_id="c-20002")
    add_customer(session, "10528", xero_id="c-walk-in")
    add_charge(
        session,
        day=DAY,
        amount="120.50",
        customer_id="20001",
        seq_no="0042",
        terminal_id="2",
        tran_timestamp=datetime(2023, 1, 15, 1, 30, 5),
    )
    add_charge(session, day=DAY, amount="-15.25", customer_id="20002", seq_no="0077")
    add_charge(session, day=DAY, amount="33.10", customer_id="10528", seq_no="0105")


def _rec(amount: str, customer: str | None, seq: str | None) -> RawTransactionRecord:
    return RawTransactionRecord(
        date=DAY, amount=Decimal(amount), customer_id=customer, seq_no=seq
    )


def test_sample_sheet_reconciles_fully(ledger_url: str) -> None:
    seed(ledger_url, _seed_sample_ledger)
    result = extract_summary(MappingGrid(SAMPLE_CELLS))

    with session_scope(database_url=ledger_url) as session:
        report = reconcile([result], SqlLedger(session))

    assert report.ok
    assert report.summary() == {
        "sales": {"verified": 2, "unverified": 0, "skipped": 0},
        "credits": {"verified": 1, "unverified": 0, "skipped": 0},
    }
    first = report.sales.verified[0]
    assert first.ledger.contact_id == "c-20001"
    assert first.ledger.terms.type is TermsType.DAYS_AFTER_BILL_DATE
    assert first.reference == "2/0042"
    assert first.notes == "Smith groceries"
    # Customers without terms on file get the default policy.
    assert report.credits.verified[0].ledger.terms.type is TermsType.DEFAULT
    report.raise_for_unverified()


def test_records_without_customer_are_skipped_not_unverified(ledger_url: str) -> None:
    seed(ledger_url, _seed_sample_ledger)
    with session_scope(database_url=ledger_url) as session:
        batch = reconcile_batch(
            [_rec("9.99", None, "0001")], SqlLedger(session), BatchKind.SALES
        )
    assert batch.ok
    assert len(batch.skipped) == 1
    assert batch.verified == [] and batch.unverified == []


@pytest.mark.parametrize(
    ("amount", "customer", "seq"),
    [
        ("120.51", "20001", "0042"),  # amount off by a cent
        ("120.50", "20009", "0042"),  # wrong customer
        ("120.50", "20001", "0043"),  # wrong sequence
    ],
)
def test_near_misses_are_unverified(ledger_url: str, amount: str, customer: str, seq: str) -> None:
    seed(ledger_url, _seed_sample_ledger)
    with session_scope(database_url=ledger_url) as session:
        batch = reconcile_batch([_rec(amount, customer, seq)], SqlLedger(session), BatchKind.SALES)
    assert not batch.ok
    assert len(batch.unverified) == 1


def test_wrong_date_is_unverified(ledger_url: str) -> None:
    seed(ledger_url, _seed_sample_ledger)
    record = RawTransactionRecord(
        date=date(2023, 1, 16), amount=Decimal("120.50"), customer_id="20001", seq_no="0042"
    )
    with session_scope(database_url=ledger_url) as session:
        batch = reconcile_batch([record], SqlLedger(session), BatchKind.SALES)
    assert batch.unverified == [record]


def test_batches_are_reconciled_independently_and_both_reported(ledger_url: str) -> None:
    seed(ledger_url, _seed_sample_ledger)
    cells = dict(SAMPLE_CELLS)
    cells["E23"] = 43  # sale no longer matches
    cells["E25"] = 78  # credit no longer matches
    result = extract_summary(MappingGrid(cells))

    with session_scope(database_url=ledger_url) as session:
        report = reconcile([result], SqlLedger(session))

    assert not report.ok
    assert len(report.sales.verified) == 1
    assert len(report.sales.unverified) == 1
    assert len(report.credits.unverified) == 1

    with pytest.raises(UnverifiedTransactionError) as excinfo:
        report.raise_for_unverified()
    err = excinfo.value
    assert [r.seq_no for r in err.sales] == ["0043"]
    assert [r.seq_no for r in err.credits] == ["0078"]
    assert len(err.records) == 2
    assert "seq=0043" in str(err)


def test_in_memory_ledger_satisfies_protocol() -> None:
    class _Ledger:
        def __init__(self) -> None:
            self.calls: list[tuple] = []

        def find_transaction(self, date, amount, customer_id, seq_no):
            self.calls.append((date, amount, customer_id, seq_no))
            return None

    ledger = _Ledger()
    batch = reconcile_batch([_rec("12.1", "20001", "0001")], ledger, BatchKind.CREDITS)
    assert ledger.calls == [(DAY, Decimal("12.10"), "20001", "0001")]
    assert batch.kind is BatchKind.CREDITS
    assert len(batch.unverified) == 1


def test_fetch_daily_totals(ledger_url: str) -> None:
    def _seed(session) -> None:
        _seed_sample_ledger(session)
        add_till_totals(
            session,
            day=DAY,
            customer_count=200,
            total_sales="5000.00",
            total_gst="150.00",
            total_account_sales="160.00",
            total_rounding="0.03",
            department_sales={"Deli": "300.00", "Bakery": "120.00"},
        )
        add_charge(
            session,
            day=DAY,
            amount="4.50",
            customer_id="10528",
            seq_no="0200",
            tran_type=TRAN_TYPE_STORE_USE,
        )
        add_charge(
            session,
            day=DAY,
            amount="-20.00",
            customer_id="10528",
            seq_no="0201",
            tran_type=TRAN_TYPE_OTHER_PAYMENT,
        )

    seed(ledger_url, _seed)
    with session_scope(database_url=ledger_url) as session:
        totals = SqlLedger(session).fetch_daily_totals(DAY, walk_in_customer_id="10528")

    assert totals.customer_count == 200
    assert totals.total_rounding == Decimal("0.03")
    assert {d.display_name: d.sell_ex for d in totals.department_sales} == {
        "Deli": Decimal("300.00"),
        "Bakery": Decimal("120.00"),
    }
    assert [e.seq_no for e in totals.store_expenses] == ["0200"]
    assert totals.total_store_expenses == Decimal("4.50")
    assert totals.total_other_payments == Decimal("-20.00")


def test_fetch_daily_totals_missing_day(ledger_url: str) -> None:
    with session_scope(database_url=ledger_url) as session:
        with pytest.raises(LookupError):
            SqlLedger(session).fetch_daily_totals(DAY, walk_in_customer_id="10528")
