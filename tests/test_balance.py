from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from day_docket.amounts import money
from day_docket.balance import check_balance, is_balanced
from day_docket.models import ExtractionResult, RawTransactionRecord

DAY = date(2023, 1, 15)


def _rec(amount: str, customer: str = "20001", seq: str = "0001") -> RawTransactionRecord:
    return RawTransactionRecord(date=DAY, amount=Decimal(amount), customer_id=customer, seq_no=seq)


def test_balanced_to_the_cent() -> None:
    sales = [_rec("120.50"), _rec("33.10")]
    credits = [_rec("-15.25")]
    assert is_balanced(sales, credits, Decimal("138.35"))
    assert not is_balanced(sales, credits, Decimal("138.36"))


def test_float_noise_does_not_break_balance() -> None:
    # 0.1 + 0.2 style drift must not matter once amounts are in cents.
    sales = [_rec(str(money(0.1))), _rec(str(money(0.2)))]
    assert is_balanced(sales, [], money(0.30000000000000004))


def test_empty_sheet_balances_at_zero() -> None:
    assert is_balanced([], [], Decimal("0"))


def test_check_balance_returns_mismatch_details() -> None:
    result = ExtractionResult(
        docket_date=DAY,
        sales=(_rec("100.00"),),
        credits=(_rec("-10.00"),),
        total_debtors=Decimal("95.00"),
    )
    mismatch = check_balance(result)
    assert mismatch is not None
    assert mismatch.extracted_total == Decimal("90.00")
    assert mismatch.total_debtors == Decimal("95.00")
    assert mismatch.difference == Decimal("-5.00")
    assert "2023-01-15" in str(mismatch)


def test_check_balance_none_when_balanced() -> None:
    result = ExtractionResult(
        docket_date=DAY, sales=(_rec("5.00"),), credits=(), total_debtors=Decimal("5")
    )
    assert check_balance(result) is None


@pytest.mark.parametrize("raw", ["abc", True, float("nan")])
def test_money_rejects_non_amounts(raw) -> None:
    with pytest.raises(ValueError):
        money(raw)
