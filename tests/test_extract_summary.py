# ruff: noqa: I001
from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from day_docket.errors import LayoutError
from day_docket.ingest.grid import MappingGrid, open_summary_sheet
from day_docket.ingest.summary import (
    SectionState,
    extract_summary,
    find_total_debtors,
    next_state,
    normalize_customer_id,
    pad_seq_no,
    read_docket,
    read_docket_date,
)
from day_docket.settings import ImportSettings

from tests.helpers.sheets import SAMPLE_CELLS, sample_cells, write_docket


# ---- State machine -------------------------------------------------------------


def test_next_state_advances_only_on_amount_sentinel() -> None:
    s = SectionState.SKIP_HEADER
    assert next_state(s, 12.5) is SectionState.SKIP_HEADER
    assert next_state(s, None) is SectionState.SKIP_HEADER
    s = next_state(s, "Amount")
    assert s is SectionState.ACCUMULATE
    assert next_state(s, "Total") is SectionState.ACCUMULATE
    assert next_state(s, " Amount ") is SectionState.DONE


# ---- Cell normalisation ----------------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(42, "0042"), (42.0, "0042"), ("7", "0007"), ("12345", "2345"), (None, None), ("", None)],
)
def test_pad_seq_no(raw, expected) -> None:
    assert pad_seq_no(raw) == expected


def test_normalize_customer_id_rules() -> None:
    amt = Decimal("10.00")
    assert normalize_customer_id(amt, "-20002", walk_in_customer_id="10528") == "20002"
    assert normalize_customer_id(amt, 20001.0, walk_in_customer_id="10528") == "20001"
    assert normalize_customer_id(amt, None, walk_in_customer_id="10528") == "10528"
    assert normalize_customer_id(amt, "  ", walk_in_customer_id="10528") == "10528"
    assert normalize_customer_id(Decimal("0.00"), "20001", walk_in_customer_id="10528") is None
    assert normalize_customer_id(None, "20001", walk_in_customer_id="10528") is None


def test_read_docket_date_accepts_serial_and_date_cells() -> None:
    assert read_docket_date(MappingGrid({"B3": 44941})) == date(2023, 1, 15)
    assert read_docket_date(MappingGrid({"B3": datetime(2023, 1, 15, 0, 0)})) == date(2023, 1, 15)
    with pytest.raises(LayoutError):
        read_docket_date(MappingGrid({"B3": "Sunday"}))
    with pytest.raises(LayoutError):
        read_docket_date(MappingGrid({}))


# ---- Full sheet ------------------------------------------------------------------


def test_extract_summary_sample_sheet() -> None:
    result = extract_summary(MappingGrid(SAMPLE_CELLS))

    assert result.docket_date == date(2023, 1, 15)
    assert result.till_variance == Decimal("1.50")
    assert result.total_debtors == Decimal("138.35")

    assert [(r.amount, r.customer_id, r.seq_no, r.notes) for r in result.sales] == [
        (Decimal("120.50"), "20001", "0042", "Smith groceries"),
        (Decimal("33.10"), "10528", "0105", None),
    ]
    assert [(r.amount, r.customer_id, r.seq_no) for r in result.credits] == [
        (Decimal("-15.25"), "20002", "0077"),
    ]
    assert all(r.date == date(2023, 1, 15) for r in (*result.sales, *result.credits))
    assert result.is_balanced


def test_store_section_and_zero_rows_are_not_extracted() -> None:
    result = extract_summary(MappingGrid(SAMPLE_CELLS))
    seqs = {r.seq_no for r in (*result.sales, *result.credits)}
    assert "0001" not in seqs  # store row before the first sentinel
    assert "0005" not in seqs  # zero amount


def test_payments_section() -> None:
    result = extract_summary(MappingGrid(SAMPLE_CELLS))
    assert [(p.amount, p.customer_id, p.seq_no, p.notes) for p in result.payments] == [
        (Decimal("50.00"), "20001", "0009", "paid cash"),
        (Decimal("20.00"), "20004", "0010", None),
    ]


def test_custom_walk_in_customer() -> None:
    result = extract_summary(MappingGrid(SAMPLE_CELLS), walk_in_customer_id="99999")
    assert result.sales[1].customer_id == "99999"


def test_extraction_is_deterministic() -> None:
    grid = MappingGrid(SAMPLE_CELLS)
    assert extract_summary(grid) == extract_summary(grid)


def test_missing_total_debtors_reports_zero() -> None:
    cells = sample_cells(B35=None, G35=None)
    grid = MappingGrid(cells)
    assert find_total_debtors(grid) == Decimal("0.00")
    result = extract_summary(grid)
    assert result.total_debtors == Decimal("0.00")
    assert not result.is_balanced


def test_unclosed_charges_section_raises() -> None:
    cells = sample_cells(C28=None)
    with pytest.raises(LayoutError, match="not closed"):
        extract_summary(MappingGrid(cells))


def test_missing_first_sentinel_raises() -> None:
    cells = sample_cells(C22=None, C28=None)
    with pytest.raises(LayoutError):
        extract_summary(MappingGrid(cells))


def test_payments_without_terminator_raise() -> None:
    cells = sample_cells(D33=None)
    with pytest.raises(LayoutError, match="Total Charges"):
        extract_summary(MappingGrid(cells))


def test_non_numeric_amount_raises() -> None:
    cells = sample_cells(C23="twelve")
    with pytest.raises(LayoutError, match="C23"):
        extract_summary(MappingGrid(cells))


# ---- Workbook I/O ----------------------------------------------------------------


def test_read_docket_from_xlsx(tmp_path: Path) -> None:
    path = write_docket(tmp_path / "DD 15.xlsx")
    result = read_docket(path, ImportSettings())
    assert result == extract_summary(MappingGrid(SAMPLE_CELLS))


def test_open_summary_sheet_missing_tab(tmp_path: Path) -> None:
    path = write_docket(tmp_path / "DD 15.xlsx", sheet_name="Summary")
    with pytest.raises(LayoutError, match="A4 Summary"):
        open_summary_sheet(path, "A4 Summary")


def test_worksheet_grid_skips_empty_cells(tmp_path: Path) -> None:
    path = write_docket(tmp_path / "DD 15.xlsx")
    grid = open_summary_sheet(path, "A4 Summary")
    assert grid.title == "A4 Summary"
    assert grid.value("C", 24) is None
    assert grid.value("c", 22) == "Amount"
    assert {(c, r) for c, r, _v in grid.cells()} == {
        (coord[0], int(coord[1:])) for coord in SAMPLE_CELLS
    }


def test_open_summary_sheet_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "DD 15.xlsx"
    path.write_bytes(b"PK\x03\x04 truncated")
    with pytest.raises(LayoutError, match="not a readable"):
        open_summary_sheet(path, "A4 Summary")


def test_extraction_logs_till_variance(caplog: pytest.LogCaptureFixture) -> None:
    name = "day_docket.ingest.summary"
    caplog.set_level(logging.INFO, logger=name)
    # The CLI's configure_logging stops propagation at the package logger.
    logging.getLogger(name).addHandler(caplog.handler)
    try:
        extract_summary(MappingGrid(SAMPLE_CELLS))
    finally:
        logging.getLogger(name).removeHandler(caplog.handler)

    assert any("till variance 1.50" in r.getMessage() for r in caplog.records)
